class KmzError(Exception):
    """Base class for kmzfile-specific errors."""


# Container level
class InvalidContainerError(KmzError):
    pass


class EncodeError(KmzError):
    pass


# Entry level
class EntryDecodeError(KmzError):
    """An entry could not be decoded even though the directory was readable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnsupportedEncodingError(EntryDecodeError):
    pass


# Caller misuse
class InvalidPathError(KmzError, ValueError):
    pass


class InvalidOperationError(KmzError):
    pass
