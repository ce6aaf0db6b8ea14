"""
Custom exceptions for range export operations.

This module defines a hierarchy of exceptions for the error conditions
that can occur while resolving a selection and exporting it as JSON.
All exceptions inherit from ExportServiceError for consistent error handling.

Example:
    try:
        host.get_active_selection()
    except SheetNotFoundError as e:
        logger.error(f"Sheet error: {e.sheet_name}")
    except ExportServiceError as e:
        logger.error(f"General error: {e}")
"""


class ExportServiceError(Exception):
    """
    Base exception for all export service errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code for API responses.
        details: Optional additional context about the error.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "EXPORT_ERROR",
        details: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """
        Convert exception to a dictionary for API responses.

        Returns:
            Dictionary containing error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidSelectionError(ExportServiceError):
    """
    Raised when an export is triggered without a usable selected range.

    The triggers report this condition to the user with an alert and
    abort; it only escapes to callers of the host directly.

    Attributes:
        reason: Why the selection cannot be exported, if more specific
            than "nothing selected".
    """

    DEFAULT_MESSAGE = "Please select a range first."

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason

        message = self.DEFAULT_MESSAGE
        if reason:
            message += f" ({reason})"

        super().__init__(
            message=message,
            error_code="INVALID_SELECTION",
            details={"reason": reason},
        )


class FileNotFoundError(ExportServiceError):
    """
    Raised when the workbook backing a host does not exist.

    Attributes:
        file_path: Path to the file that was not found.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(
            message=f"Workbook not found: {file_path}",
            error_code="FILE_NOT_FOUND",
            details={"file_path": file_path},
        )


class InvalidFileFormatError(ExportServiceError):
    """
    Raised when the file is not a workbook openpyxl can load.

    Attributes:
        file_path: Path to the invalid file.
        expected_formats: List of supported extensions.
        reason: Specific reason for the format error.
    """

    def __init__(
        self,
        file_path: str,
        expected_formats: list[str] | None = None,
        reason: str | None = None,
    ) -> None:
        self.file_path = file_path
        self.expected_formats = expected_formats or [".xlsx", ".xlsm"]
        self.reason = reason

        message = f"Invalid workbook format: {file_path}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="INVALID_FILE_FORMAT",
            details={
                "file_path": file_path,
                "expected_formats": self.expected_formats,
                "reason": reason,
            },
        )


class SheetNotFoundError(ExportServiceError):
    """
    Raised when the requested sheet does not exist in the workbook.

    Attributes:
        sheet_name: Name of the sheet that was not found.
        available_sheets: List of sheets available in the workbook.
    """

    def __init__(
        self,
        sheet_name: str,
        available_sheets: list[str] | None = None,
    ) -> None:
        self.sheet_name = sheet_name
        self.available_sheets = available_sheets or []

        message = f"Sheet not found: {sheet_name}"
        if available_sheets:
            message += f". Available sheets: {', '.join(available_sheets)}"

        super().__init__(
            message=message,
            error_code="SHEET_NOT_FOUND",
            details={
                "sheet_name": sheet_name,
                "available_sheets": self.available_sheets,
            },
        )


class CellRangeError(ExportServiceError):
    """
    Raised when an explicit range is not valid A1 notation.

    Covers syntax errors (e.g. "A1:") and ranges whose end lies before
    their start.

    Attributes:
        cell_range: The invalid cell range string.
        reason: Specific reason why the range is invalid.
    """

    def __init__(
        self,
        cell_range: str,
        reason: str | None = None,
    ) -> None:
        self.cell_range = cell_range
        self.reason = reason

        message = f"Invalid cell range: {cell_range}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="INVALID_CELL_RANGE",
            details={
                "cell_range": cell_range,
                "reason": reason,
            },
        )


class ReadError(ExportServiceError):
    """
    Raised when reading the workbook fails for reasons not covered above.

    Attributes:
        file_path: Path to the file being read.
        operation: The specific read operation that failed.
        reason: Specific reason for the read failure.
    """

    def __init__(
        self,
        file_path: str,
        operation: str = "read",
        reason: str | None = None,
    ) -> None:
        self.file_path = file_path
        self.operation = operation
        self.reason = reason

        message = f"Failed to {operation} workbook: {file_path}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="READ_ERROR",
            details={
                "file_path": file_path,
                "operation": operation,
                "reason": reason,
            },
        )


class UnknownActionError(ExportServiceError):
    """
    Raised when a menu action name has no registered trigger.

    Attributes:
        action: The action name that was requested.
        available_actions: Action names the menu does provide.
    """

    def __init__(
        self,
        action: str,
        available_actions: list[str] | None = None,
    ) -> None:
        self.action = action
        self.available_actions = available_actions or []

        super().__init__(
            message=f"Unknown menu action: {action}",
            error_code="UNKNOWN_ACTION",
            details={
                "action": action,
                "available_actions": self.available_actions,
            },
        )
