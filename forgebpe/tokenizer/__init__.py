from .bpe import BPETokenizer
from .config import TokenizerConfig
from .errors import ForgeBPEError, LoadError
from .merges import MergeRule, MergeTable
from .pretokenize import pretokenize
from .trainer import BPETrainer, train_bpe
from .vocab import SpecialTokens, Vocabulary

__all__ = [
    "BPETokenizer", "BPETrainer", "ForgeBPEError", "LoadError", "MergeRule", "MergeTable",
    "SpecialTokens", "TokenizerConfig", "Vocabulary", "pretokenize", "train_bpe",
]
