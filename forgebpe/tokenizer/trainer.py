from __future__ import annotations
import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import trange

from .config import TokenizerConfig
from .merges import MergeTable, Pair
from .pretokenize import pretokenize, is_whitespace_segment
from .vocab import SpecialTokens, Vocabulary

logger = logging.getLogger(__name__)


def merge_symbols(seq: List[str], pair: Pair, merged: str) -> List[str]:
    """Replace every non-overlapping left-to-right occurrence of `pair` in `seq`."""
    if len(seq) < 2:
        return seq
    a, b = pair
    out: List[str] = []
    i = 0
    while i < len(seq):
        if i < len(seq) - 1 and seq[i] == a and seq[i + 1] == b:
            out.append(merged)
            i += 2
        else:
            out.append(seq[i])
            i += 1
    return out


class BPETrainer:
    """
    Learns merge rules from a corpus.

    Segments are kept as a frequency table (segment -> count), so each pair
    count equals what a per-occurrence scan of the corpus would give.
    Among pairs with the same count the smallest (left, right) wins, which
    keeps training reproducible.
    """

    def __init__(self, config: Optional[TokenizerConfig] = None, min_freq: int = 1, progress: bool = False):
        if min_freq < 1:
            raise ValueError("min_freq must be >= 1")
        self.config = config or TokenizerConfig()
        self.min_freq = min_freq
        self.progress = progress

    @staticmethod
    def collect_segments(corpus: Iterable[str]) -> Counter:
        segs: Counter = Counter()
        for text in corpus:
            for seg in pretokenize(text):
                if not is_whitespace_segment(seg):
                    segs[seg] += 1
        return segs

    def build_alphabet(self, segments: Iterable[str]) -> Tuple[Vocabulary, SpecialTokens]:
        cfg = self.config
        vocab = Vocabulary()
        for ch in cfg.base_alphabet:
            vocab.register(ch)
        if cfg.extend_alphabet:
            seen = {ch for seg in segments for ch in seg}
            for ch in sorted(seen - set(cfg.base_alphabet)):
                vocab.register(ch)
        specials = vocab.register_specials(cfg.unk_token, cfg.pad_token, cfg.eos_token)
        return vocab, specials

    @staticmethod
    def get_stats(words: Dict[Tuple[str, ...], int]) -> Counter:
        pairs: Counter = Counter()
        for seq, freq in words.items():
            for i in range(len(seq) - 1):
                pairs[(seq[i], seq[i + 1])] += freq
        return pairs

    @staticmethod
    def best_pair(stats: Counter) -> Tuple[Pair, int]:
        return min(stats.items(), key=lambda kv: (-kv[1], kv[0]))

    def train(self, corpus: Iterable[str], max_merges: int) -> Tuple[Vocabulary, SpecialTokens, MergeTable]:
        if max_merges < 0:
            raise ValueError(f"max_merges must be >= 0, got {max_merges}")
        segments = self.collect_segments(corpus)
        vocab, specials = self.build_alphabet(segments)
        merges = MergeTable()

        words: Dict[Tuple[str, ...], int] = Counter()
        for seg, freq in segments.items():
            words[tuple(seg)] += freq
        logger.info("training BPE: %d unique segments, %d base symbols, max_merges=%d",
                    len(words), len(vocab), max_merges)

        for i in trange(max_merges, desc="merges", disable=not self.progress):
            stats = self.get_stats(words)
            if not stats:
                logger.info("no pairs left to merge, stopping after %d merges", i)
                break
            (a, b), freq = self.best_pair(stats)
            if freq < self.min_freq:
                logger.info("best pair %r occurs %d < min_freq=%d times, stopping", (a, b), freq, self.min_freq)
                break
            rule = merges.add(a, b)
            vocab.register(rule.merged)
            new_words: Dict[Tuple[str, ...], int] = Counter()
            for seq, f in words.items():
                new_words[tuple(merge_symbols(list(seq), (a, b), rule.merged))] += f
            words = new_words
            logger.debug("merge %d/%d: %r + %r -> %r (freq %d)", i + 1, max_merges, a, b, rule.merged, freq)

        logger.info("BPE training done: vocab=%d merges=%d", len(vocab), len(merges))
        return vocab, specials, merges


def train_bpe(corpus: Iterable[str], max_merges: int, config: Optional[TokenizerConfig] = None,
              progress: bool = False) -> Tuple[Vocabulary, SpecialTokens, MergeTable]:
    return BPETrainer(config, progress=progress).train(corpus, max_merges)
