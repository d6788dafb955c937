from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

SPECIAL_NAMES = {
    "unk": "unk", "unknown": "unk",
    "pad": "pad", "padding": "pad",
    "eos": "eos", "end-of-sequence": "eos", "end_of_sequence": "eos",
}


@dataclass(frozen=True)
class SpecialTokens:
    """Ids (and text) of the reserved tokens, fixed at registration time."""
    unk: str
    pad: str
    eos: str
    unk_id: int
    pad_id: int
    eos_id: int

    def ids(self):
        return {self.unk_id, self.pad_id, self.eos_id}

    def id_for(self, name: str) -> int:
        key = SPECIAL_NAMES.get(name.strip().lower())
        if key is None:
            raise KeyError(f"unknown special token name {name!r} (expected unk, pad or eos)")
        return getattr(self, f"{key}_id")


class Vocabulary:
    """
    Bidirectional symbol <-> id map. Ids are dense and handed out in insertion
    order; nothing is ever removed or renumbered.
    """

    def __init__(self):
        self.token_to_id: Dict[str, int] = {}
        self.id_to_token: List[str] = []

    def register(self, symbol: str) -> int:
        tid = self.token_to_id.get(symbol)
        if tid is not None:
            return tid
        tid = len(self.id_to_token)
        self.token_to_id[symbol] = tid
        self.id_to_token.append(symbol)
        return tid

    def register_specials(self, unk: str, pad: str, eos: str) -> SpecialTokens:
        """Append the reserved tokens; each must be new so its id has no other meaning."""
        taken = [s for s in (unk, pad, eos) if s in self.token_to_id]
        if taken:
            raise ValueError(f"special tokens already registered as ordinary symbols: {taken}")
        return SpecialTokens(
            unk=unk, pad=pad, eos=eos,
            unk_id=self.register(unk),
            pad_id=self.register(pad),
            eos_id=self.register(eos),
        )

    def size(self) -> int:
        return len(self.id_to_token)

    def __len__(self):
        return len(self.id_to_token)

    def __contains__(self, symbol):
        return symbol in self.token_to_id

    def __iter__(self) -> Iterator[str]:
        return iter(self.id_to_token)

    def lookup_id(self, symbol: str) -> Optional[int]:
        return self.token_to_id.get(symbol)

    def lookup_symbol(self, tid: int) -> Optional[str]:
        if 0 <= tid < len(self.id_to_token):
            return self.id_to_token[tid]
        return None

    def to_dict(self) -> Dict[str, int]:
        return dict(self.token_to_id)

    @classmethod
    def from_dict(cls, mapping: Dict[str, int]) -> "Vocabulary":
        """Rebuild from a persisted symbol -> id map; ids must be exactly 0..n-1."""
        by_id: Dict[int, str] = {}
        for sym, tid in mapping.items():
            if not isinstance(sym, str) or not sym:
                raise ValueError(f"invalid symbol {sym!r}")
            if isinstance(tid, bool) or not isinstance(tid, int):
                raise ValueError(f"id for {sym!r} is not an integer: {tid!r}")
            if tid in by_id:
                raise ValueError(f"id {tid} assigned to both {by_id[tid]!r} and {sym!r}")
            by_id[tid] = sym
        n = len(by_id)
        if set(by_id) != set(range(n)):
            missing = sorted(set(range(n)) - set(by_id))[:5]
            raise ValueError(f"ids are not dense 0..{n - 1} (missing e.g. {missing})")
        vocab = cls()
        for tid in range(n):
            vocab.register(by_id[tid])
        return vocab

    def __repr__(self):
        return f"Vocabulary(size={len(self)})"
