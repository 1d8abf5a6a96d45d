"""Filesystem collaborators: task input loading and output persistence."""

from testsmith.files.content_source import ContentSource
from testsmith.files.exceptions import (
    BackupFailed,
    FileOperationError,
    InputEmpty,
    InputError,
    InputNotFound,
    InputTooLarge,
    InputUnreadable,
    OutputError,
    WriteFailed,
)
from testsmith.files.output_sink import OutputSink, backup_path_for

__all__ = [
    "BackupFailed",
    "ContentSource",
    "FileOperationError",
    "InputEmpty",
    "InputError",
    "InputNotFound",
    "InputTooLarge",
    "InputUnreadable",
    "OutputError",
    "OutputSink",
    "WriteFailed",
    "backup_path_for",
]
