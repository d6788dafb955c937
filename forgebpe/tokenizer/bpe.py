from __future__ import annotations
import json
import logging
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import TokenizerConfig
from .errors import LoadError
from .merges import MergeTable
from .pretokenize import pretokenize, is_whitespace_segment
from .trainer import BPETrainer
from .vocab import SpecialTokens, Vocabulary

logger = logging.getLogger(__name__)

VOCAB_FILE = "vocab.json"
MERGES_FILE = "merges.txt"
CONFIG_FILE = "tokenizer_config.json"


class BPETokenizer:
    """
    Character-level BPE tokenizer.

    - Vocabulary: base alphabet, then <UNK>/<PAD>/<EOS>, then learned merges.
    - encode(): pretokenize, merge each non-whitespace segment by rank,
      fall back to single characters and finally <UNK> for anything the
      vocabulary does not know. Never raises.
    - decode(): plain concatenation, <UNK> text for unknown ids.

    The vocabulary and merge table are not mutated after construction,
    train() or load(); train() replaces them wholesale and empties the cache.
    """

    def __init__(self,
                 vocab: Optional[Vocabulary] = None,
                 merges: Optional[MergeTable] = None,
                 specials: Optional[SpecialTokens] = None,
                 config: Optional[TokenizerConfig] = None):
        self.config = config or TokenizerConfig()
        if vocab is None:
            # untrained: alphabet + specials, no merges
            vocab, specials = BPETrainer(self.config).build_alphabet(())
        if specials is None:
            specials = self._find_specials(vocab, self.config)
        self._lock = threading.Lock()
        self._set_tables(vocab, specials, merges or MergeTable())

    @staticmethod
    def _find_specials(vocab: Vocabulary, config: TokenizerConfig) -> SpecialTokens:
        ids = {}
        for name in ("unk", "pad", "eos"):
            text = getattr(config, f"{name}_token")
            tid = vocab.lookup_id(text)
            if tid is None:
                raise ValueError(f"special token {text!r} is not in the vocabulary")
            ids[name] = tid
        return SpecialTokens(config.unk_token, config.pad_token, config.eos_token,
                             ids["unk"], ids["pad"], ids["eos"])

    def _set_tables(self, vocab: Vocabulary, specials: SpecialTokens, merges: MergeTable):
        with self._lock:
            self.vocab = vocab
            self.specials = specials
            self.merges = merges
            self._cache: "OrderedDict[str, Tuple[str, ...]]" = OrderedDict()
            self._generation = getattr(self, "_generation", 0) + 1
            self.cache_hits = 0
            self.cache_misses = 0

    # ------------- Training -------------

    def train(self, corpus: Iterable[str], max_merges: int, progress: bool = False) -> None:
        """
        Learn up to `max_merges` merges from `corpus`. Always starts from a
        fresh vocabulary, so calling it twice with the same input gives the
        same tables rather than stacking merges.

        Encodes running while this swaps the tables may return ids from
        either table set; their results are not cached.
        """
        vocab, specials, merges = BPETrainer(self.config, progress=progress).train(corpus, max_merges)
        self._set_tables(vocab, specials, merges)

    # ------------- Introspection -------------

    def vocabulary_size(self) -> int:
        return self.vocab.size()

    def special_token_id(self, name: str) -> int:
        return self.specials.id_for(name)

    def is_eos(self, tid: int) -> bool:
        return tid == self.specials.eos_id

    @property
    def unk_id(self) -> int:
        return self.specials.unk_id

    @property
    def pad_id(self) -> int:
        return self.specials.pad_id

    @property
    def eos_id(self) -> int:
        return self.specials.eos_id

    def __repr__(self):
        return f"BPETokenizer(vocab={self.vocabulary_size()}, merges={len(self.merges)})"

    # ------------- Encoding -------------

    def bpe_encode_segment(self, segment: str) -> List[str]:
        """Merge one segment by rank: leftmost occurrence of the best pair, then rescan."""
        return self._apply_ranks(segment, self.merges.ranks)

    @staticmethod
    def _apply_ranks(segment, ranks) -> List[str]:
        symbols = list(segment)
        while len(symbols) > 1:
            best_i, best_rank = -1, None
            for i in range(len(symbols) - 1):
                r = ranks.get((symbols[i], symbols[i + 1]))
                if r is not None and (best_rank is None or r < best_rank):
                    best_i, best_rank = i, r
            if best_i < 0:
                break
            symbols[best_i:best_i + 2] = [symbols[best_i] + symbols[best_i + 1]]
        return symbols

    def _segment_symbols(self, segment: str) -> Tuple[str, ...]:
        limit = self.config.cache_size
        with self._lock:
            hit = self._cache.get(segment)
            if hit is not None:
                self.cache_hits += 1
                if limit is not None:
                    self._cache.move_to_end(segment)
                return hit
            generation, ranks = self._generation, self.merges.ranks
        symbols = tuple(self._apply_ranks(segment, ranks))
        with self._lock:
            self.cache_misses += 1
            # skip the insert if train() swapped the tables meanwhile
            if limit != 0 and generation == self._generation:
                self._cache[segment] = symbols
                if limit is not None:
                    while len(self._cache) > limit:
                        self._cache.popitem(last=False)
        return symbols

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _char_ids(self, text: str) -> List[int]:
        out = []
        for ch in text:
            tid = self.vocab.lookup_id(ch)
            out.append(self.specials.unk_id if tid is None else tid)
        return out

    def encode(self, text: str, add_eos: Optional[bool] = None) -> List[int]:
        ids: List[int] = []
        for seg in pretokenize(text):
            if is_whitespace_segment(seg):
                tid = self.vocab.lookup_id(seg)
                if tid is not None:
                    ids.append(tid)
                elif self.config.encode_unregistered_whitespace:
                    ids.extend(self._char_ids(seg))
                continue
            for sym in self._segment_symbols(seg):
                tid = self.vocab.lookup_id(sym)
                if tid is not None:
                    ids.append(tid)
                else:
                    logger.debug("symbol %r not in vocabulary, falling back to characters", sym)
                    ids.extend(self._char_ids(sym))
        if add_eos is None:
            add_eos = self.config.add_eos
        if add_eos:
            ids.append(self.specials.eos_id)
        return ids

    def encode_batch(self, texts: Iterable[str], add_eos: Optional[bool] = None) -> List[List[int]]:
        return [self.encode(t, add_eos=add_eos) for t in texts]

    def tokenize(self, text: str) -> List[str]:
        """The vocabulary symbols behind encode(text), for inspection."""
        return [self.vocab.id_to_token[i] for i in self.encode(text, add_eos=False)]

    # ------------- Decoding -------------

    def decode(self, ids: Sequence[int], skip_special_tokens: bool = False) -> str:
        special_ids = self.specials.ids() if skip_special_tokens else ()
        parts = []
        for tid in ids:
            tid = int(tid)  # accepts 0-d tensors / numpy ints
            if tid in special_ids:
                continue
            sym = self.vocab.lookup_symbol(tid)
            if sym is None:
                logger.debug("unknown id %r decoded as %r", tid, self.specials.unk)
                if skip_special_tokens:
                    continue
                sym = self.specials.unk
            parts.append(sym)
        return "".join(parts)

    def decode_batch(self, batch_ids: Iterable[Sequence[int]], skip_special_tokens: bool = False) -> List[str]:
        return [self.decode(ids, skip_special_tokens=skip_special_tokens) for ids in batch_ids]

    # ---------------- Save / Load ----------------

    def save(self, directory) -> Path:
        out = Path(directory)
        out.mkdir(parents=True, exist_ok=True)
        with open(out / VOCAB_FILE, "w", encoding="utf-8") as f:
            json.dump(self.vocab.to_dict(), f, ensure_ascii=False, indent=0)
        with open(out / MERGES_FILE, "w", encoding="utf-8") as f:
            f.write("\n".join(self.merges.to_lines()) + "\n")
        with open(out / CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(self.config.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("saved tokenizer to %s (vocab=%d, merges=%d)", out, len(self.vocab), len(self.merges))
        return out

    @classmethod
    def load(cls, directory) -> "BPETokenizer":
        d = Path(directory)
        config = None
        if (d / CONFIG_FILE).exists():
            obj = _read_json(d / CONFIG_FILE)
            try:
                if not isinstance(obj, dict):
                    raise ValueError("expected a JSON object")
                config = TokenizerConfig.from_dict(obj)
            except (TypeError, ValueError) as e:
                raise LoadError(d / CONFIG_FILE, f"invalid config: {e}") from e
        return cls.from_files(d / VOCAB_FILE, d / MERGES_FILE, config=config)

    @classmethod
    def from_files(cls, vocab_path, merges_path, config: Optional[TokenizerConfig] = None) -> "BPETokenizer":
        config = config or TokenizerConfig()
        vocab_path, merges_path = Path(vocab_path), Path(merges_path)

        obj = _read_json(vocab_path)
        if not isinstance(obj, dict):
            raise LoadError(vocab_path, "expected a JSON object mapping symbol -> id")
        try:
            vocab = Vocabulary.from_dict(obj)
        except ValueError as e:
            raise LoadError(vocab_path, str(e)) from e
        try:
            specials = cls._find_specials(vocab, config)
        except ValueError as e:
            raise LoadError(vocab_path, str(e)) from e

        try:
            merges = MergeTable.from_lines(_read_text(merges_path).splitlines())
        except ValueError as e:
            raise LoadError(merges_path, str(e)) from e
        for rule in merges:
            for sym in (rule.left, rule.right, rule.merged):
                if sym not in vocab:
                    raise LoadError(merges_path, f"merge #{rule.rank} ({rule.left!r}, {rule.right!r}) "
                                                 f"uses {sym!r}, which is not in the vocabulary")

        logger.info("loaded tokenizer: vocab=%d merges=%d", len(vocab), len(merges))
        return cls(vocab=vocab, merges=merges, specials=specials, config=config)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LoadError(path, "file not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(path, f"cannot read file: {e}") from e


def _read_json(path: Path):
    text = _read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(path, f"invalid JSON: {e}") from e
