from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

MERGES_HEADER = "#version: 0.2"

Pair = Tuple[str, str]


class MergeRule(NamedTuple):
    left: str
    right: str
    merged: str
    rank: int


class MergeTable:
    """
    Merge rules in learned order plus a pair -> rank index.
    Rank 1 is the first rule learned and the first one applied.
    """

    def __init__(self, pairs: Optional[Iterable[Pair]] = None):
        self.rules: List[MergeRule] = []
        self.ranks: Dict[Pair, int] = {}
        for left, right in pairs or ():
            self.add(left, right)

    def add(self, left: str, right: str) -> MergeRule:
        pair = (left, right)
        if pair in self.ranks:
            raise ValueError(f"duplicate merge {pair!r}")
        rule = MergeRule(left, right, left + right, len(self.rules) + 1)
        self.rules.append(rule)
        self.ranks[pair] = rule.rank
        return rule

    def rank(self, left: str, right: str) -> Optional[int]:
        return self.ranks.get((left, right))

    @property
    def pairs(self) -> List[Pair]:
        return [(r.left, r.right) for r in self.rules]

    def __len__(self):
        return len(self.rules)

    def __iter__(self) -> Iterator[MergeRule]:
        return iter(self.rules)

    def __eq__(self, other):
        if not isinstance(other, MergeTable):
            return NotImplemented
        return self.pairs == other.pairs

    def __repr__(self):
        return f"MergeTable(len={len(self)})"

    # ---------------- text form ----------------

    def to_lines(self) -> List[str]:
        return [MERGES_HEADER] + [f"{r.left} {r.right}" for r in self.rules]

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "MergeTable":
        """Parse the merges file body; line position defines rank."""
        table = cls()
        for lineno, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            if lineno == 1 and line.startswith("#version"):
                continue
            parts = line.split(" ")
            if len(parts) != 2 or not parts[0] or not parts[1]:
                raise ValueError(f"line {lineno}: expected 'left right', got {line!r}")
            try:
                table.add(parts[0], parts[1])
            except ValueError as e:
                raise ValueError(f"line {lineno}: {e}") from None
        return table
