"""
Custom exceptions for the export service.

Provides type-safe, descriptive exceptions for error handling throughout
the application.
"""

from src.exceptions.export_exceptions import (
    CellRangeError,
    ExportServiceError,
    InvalidFileFormatError,
    InvalidSelectionError,
    ReadError,
    SheetNotFoundError,
    UnknownActionError,
)
from src.exceptions.export_exceptions import (
    FileNotFoundError as ExportFileNotFoundError,
)

__all__ = [
    "ExportServiceError",
    "InvalidSelectionError",
    "ExportFileNotFoundError",
    "InvalidFileFormatError",
    "SheetNotFoundError",
    "CellRangeError",
    "ReadError",
    "UnknownActionError",
]
