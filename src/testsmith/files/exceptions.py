"""Exceptions for reading task inputs and persisting generated output."""


class FileOperationError(Exception):
    """Base exception for all filesystem operations."""


class InputError(FileOperationError):
    """Base exception for task input problems."""


class InputNotFound(InputError):
    """Raised when an input path does not exist or is not a regular file."""


class InputEmpty(InputError):
    """Raised when an input file has no non-whitespace content."""


class InputTooLarge(InputError):
    """Raised when an input exceeds the configured size ceiling."""


class InputUnreadable(InputError):
    """Raised when an input file cannot be read or is not valid UTF-8."""


class OutputError(FileOperationError):
    """Base exception for output persistence problems."""


class BackupFailed(OutputError):
    """Raised when the pre-write backup cannot be created."""


class WriteFailed(OutputError):
    """Raised when the target file cannot be written."""
