from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

from .pretokenize import pretokenize

# Printable ASCII, code points 32..126 (space included).
PRINTABLE_ASCII = "".join(chr(i) for i in range(32, 127))


@dataclass(frozen=True)
class TokenizerConfig:
    unk_token: str = "<UNK>"
    pad_token: str = "<PAD>"
    eos_token: str = "<EOS>"
    base_alphabet: str = PRINTABLE_ASCII
    extend_alphabet: bool = True          # add unseen corpus chars before the specials
    add_eos: bool = False
    cache_size: Optional[int] = None      # None = unbounded, 0 = no caching
    encode_unregistered_whitespace: bool = False

    def __post_init__(self):
        specials = [self.unk_token, self.pad_token, self.eos_token]
        if any(not s for s in specials):
            raise ValueError("special tokens must be non-empty strings")
        if len(set(specials)) != len(specials):
            raise ValueError(f"special tokens must be distinct, got {specials}")
        # a single-segment special could be learned as a merge or be an alphabet char
        for s in specials:
            if len(pretokenize(s)) < 2:
                raise ValueError(f"special token {s!r} must span several segments, e.g. '<{s}>'")
        if self.cache_size is not None and self.cache_size < 0:
            raise ValueError("cache_size must be >= 0 or None")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "TokenizerConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(obj) - known
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        return cls(**obj)
