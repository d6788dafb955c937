class ForgeBPEError(Exception):
    """Base class for tokenizer errors."""


class LoadError(ForgeBPEError):
    """A persisted vocabulary/merges/config file is missing or malformed."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
