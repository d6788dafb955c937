from .tokenizer import BPETokenizer, TokenizerConfig, LoadError

__version__ = "0.1.0"

__all__ = ["BPETokenizer", "TokenizerConfig", "LoadError", "__version__"]
