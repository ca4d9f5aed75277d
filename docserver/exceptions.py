"""Custom exception classes for the document server."""


class AskDocException(Exception):
    """
    Base exception class for all document server errors.
    """
    pass


class ValidationError(AskDocException):
    """
    Raised when a required field is missing or malformed.
    """
    pass


class NotFoundError(AskDocException):
    """
    Raised when a referenced folder or file does not exist where it must.
    """
    pass


class FolderNotFoundError(NotFoundError):
    """
    Raised when a folder id does not resolve within the requested namespace.
    """
    pass


class FileRecordNotFoundError(NotFoundError):
    """
    Raised when a file record, or the blob behind it, does not exist.
    """
    pass


class PayloadTooLargeError(AskDocException):
    """
    Raised when an upload exceeds the configured size limit.
    """
    pass


class StorageIOError(AskDocException):
    """
    Raised when reading or writing a blob on disk fails.
    """
    pass


class BackendError(AskDocException):
    """
    Raised when the underlying SQLite store fails.
    """
    pass
