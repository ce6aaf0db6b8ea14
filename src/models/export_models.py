"""
Pydantic models for range export operations.

This module contains the export documents produced by the JSON builders,
the UI surfaces handed to a host (menu, alert, dialog), and the
request/response models used by the FastAPI and MCP interfaces.

Export documents serialize with camelCase keys in a fixed order:

    {
      "metadata": {
        "sheetName": "Sheet1",
        "range": "B2:C3",
        "dimensions": {"rows": 2, "columns": 2},
        "exportedAt": "2026-10-19T08:30:00.000Z",
        "exportType": "values"
      },
      "data": [[1, 2], [3, 4]]
    }
"""

import html
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator


def format_instant(value: datetime) -> str:
    """
    Format an instant as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are taken to be UTC already.

    Args:
        value: The instant to format.

    Returns:
        String such as "2026-10-19T08:30:00.000Z".
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


class ExportType(str, Enum):
    """
    Enumeration of export modes.

    The value is the tag written to metadata.exportType.
    """

    VALUES = "values"
    FORMULAS = "formulas"
    COMBINED = "combined"


class CellRange(BaseModel):
    """
    Represents a resolved rectangular cell range.

    Attributes:
        start_row: Starting row index (0-based).
        end_row: Ending row index (0-based, inclusive).
        start_col: Starting column index (0-based).
        end_col: Ending column index (0-based, inclusive).
        a1_notation: A1 label of the range as the user sees it.
    """

    start_row: int = Field(
        ge=0,
        description="Starting row index (0-based)",
    )
    end_row: int = Field(
        ge=0,
        description="Ending row index (0-based, inclusive)",
    )
    start_col: int = Field(
        ge=0,
        description="Starting column index (0-based)",
    )
    end_col: int = Field(
        ge=0,
        description="Ending column index (0-based, inclusive)",
    )
    a1_notation: str | None = Field(
        default=None,
        description="A1 label of the range (e.g., 'B2:C3')",
    )

    @field_validator("end_row")
    @classmethod
    def validate_end_row(cls, v: int, info) -> int:
        """Ensure end_row is greater than or equal to start_row."""
        if "start_row" in info.data and v < info.data["start_row"]:
            raise ValueError("end_row must be >= start_row")
        return v

    @field_validator("end_col")
    @classmethod
    def validate_end_col(cls, v: int, info) -> int:
        """Ensure end_col is greater than or equal to start_col."""
        if "start_col" in info.data and v < info.data["start_col"]:
            raise ValueError("end_col must be >= start_col")
        return v

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def column_count(self) -> int:
        return self.end_col - self.start_col + 1


class Dimensions(BaseModel):
    """Row and column counts of an exported range."""

    rows: int = Field(ge=0, description="Number of rows in the range")
    columns: int = Field(ge=0, description="Number of columns in the range")


class ExportMetadata(BaseModel):
    """
    Metadata block shared by every export document.

    Field order is the serialized key order.

    Attributes:
        sheet_name: Name of the sheet holding the range.
        range: A1 label of the range.
        dimensions: Row and column counts.
        exported_at: Instant the document was built.
        export_type: Which payload shape the document carries.
    """

    model_config = {"populate_by_name": True}

    sheet_name: str = Field(
        alias="sheetName",
        description="Name of the sheet holding the range",
    )
    range: str = Field(
        description="A1 label of the range (e.g., 'A1:C3')",
    )
    dimensions: Dimensions = Field(
        description="Row and column counts of the range",
    )
    exported_at: datetime = Field(
        alias="exportedAt",
        description="Instant the document was built (ISO-8601, UTC)",
    )
    export_type: ExportType = Field(
        alias="exportType",
        description="Export type tag: values, formulas or combined",
    )

    @field_serializer("exported_at")
    def serialize_exported_at(self, value: datetime) -> str:
        return format_instant(value)


class ValuesExportDocument(BaseModel):
    """Document produced by a values export."""

    metadata: ExportMetadata
    data: list[list[Any]] = Field(description="Cell value grid")


class FormulasExportDocument(BaseModel):
    """Document produced by a formulas export."""

    metadata: ExportMetadata
    data: list[list[str]] = Field(
        description="Formula grid; empty string where a cell holds a literal",
    )


class CombinedExportDocument(BaseModel):
    """Document produced by a combined export."""

    metadata: ExportMetadata
    values: list[list[Any]] = Field(description="Cell value grid")
    formulas: list[list[str]] = Field(
        description="Formula grid; empty string where a cell holds a literal",
    )


ExportDocument = ValuesExportDocument | FormulasExportDocument | CombinedExportDocument


class MenuItem(BaseModel):
    """
    A single entry of the export menu.

    Attributes:
        label: Text shown to the user.
        action: Name of the trigger the entry invokes.
    """

    label: str = Field(description="Text shown to the user")
    action: str = Field(description="Name of the trigger the entry invokes")


class Menu(BaseModel):
    """A top-level host menu and its items."""

    title: str = Field(description="Menu title shown in the host UI")
    items: list[MenuItem] = Field(default_factory=list)


class Alert(BaseModel):
    """A blocking informational alert shown to the user."""

    message: str


class Dialog(BaseModel):
    """
    A modal dialog presenting exported JSON for manual copying.

    Attributes:
        title: Dialog window title.
        label: Description of what was exported (e.g., "Values").
        body: The JSON text.
        width: Dialog width in logical units.
        height: Dialog height in logical units.
    """

    title: str
    label: str
    body: str
    width: int = Field(default=500, gt=0)
    height: int = Field(default=300, gt=0)

    def to_html(self) -> str:
        """
        Render the dialog as a standalone HTML page.

        The JSON sits in a read-only textarea so the user can select and
        copy it; nothing writes to the clipboard on the user's behalf.
        """
        title = html.escape(self.title)
        label = html.escape(self.label)
        body = html.escape(self.body)
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            '<meta charset="utf-8">\n'
            f"<title>{title}</title>\n"
            "<style>\n"
            f"body {{ font-family: sans-serif; margin: 8px; width: {self.width - 16}px; }}\n"
            f"textarea {{ width: 100%; height: {self.height - 80}px; font-family: monospace; }}\n"
            "</style>\n"
            "</head>\n"
            "<body>\n"
            f"<p>Exported {label} as JSON. Select the text below and copy it.</p>\n"
            f'<textarea readonly onfocus="this.select()">{body}</textarea>\n'
            "</body>\n"
            "</html>\n"
        )


class ExportRequest(BaseModel):
    """
    Request model for exporting a range from a workbook file.

    Attributes:
        file_path: Path to the workbook.
        sheet_name: Sheet to export from. If None, uses the active sheet.
        cell_range: Range in A1 notation. If None, uses the saved selection.
    """

    file_path: str = Field(
        description="Path to the workbook (.xlsx or .xlsm)",
    )
    sheet_name: str | None = Field(
        default=None,
        description="Sheet to export from. If None, uses the workbook's active sheet.",
    )
    cell_range: str | None = Field(
        default=None,
        description="Range in A1 notation (e.g., 'B2:C3'). If None, uses the saved selection.",
    )


class ExportResponse(BaseModel):
    """
    Response model for a successful export.

    Mirrors the dialog the host would show, plus the parsed document.
    """

    success: bool = Field(default=True)
    export_type: ExportType
    title: str
    label: str
    width: int
    height: int
    json_text: str = Field(description="Rendered JSON, as shown in the dialog")
    document: dict[str, Any] = Field(description="Parsed export document")


class ExportErrorResponse(BaseModel):
    """
    Standard error response model for the API.

    Attributes:
        success: Always False for error responses.
        error_code: Machine-readable error code.
        message: Human-readable error description.
        details: Additional error context.
    """

    success: bool = Field(
        default=False,
        description="Always False for error responses",
    )
    error_code: str = Field(
        description="Machine-readable error code",
    )
    message: str = Field(
        description="Human-readable error description",
    )
    details: dict | None = Field(
        default=None,
        description="Additional error context",
    )
