"""
Openpyxl host adapter for workbook files.

This module provides OpenpyxlHost, a HostCollaborator backed by an Excel
workbook on disk, and WorkbookRange, the RangeHandle it hands out.

The workbook is opened twice: once with data_only=False to read formula
text, and once with data_only=True to read the values Excel cached the
last time the file was calculated. Selections come from the sheet view
saved in the file (what the user had selected when they last saved it),
unless an explicit A1 range is supplied.

Supported formats:
    - .xlsx (Excel 2007+)
    - .xlsm (Excel Macro-Enabled)

Example:
    host = OpenpyxlHost("/path/to/book.xlsx", sheet_name="Data")
    selection = host.get_active_selection()
    if selection is not None:
        print(selection.label(), selection.values())
"""

import logging
import re
import zipfile
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import Cell
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet

from src.exceptions.export_exceptions import (
    CellRangeError,
    InvalidFileFormatError,
    InvalidSelectionError,
    ReadError,
    SheetNotFoundError,
)
from src.exceptions.export_exceptions import FileNotFoundError as ExportFileNotFoundError
from src.models.export_models import Alert, CellRange, Dialog, Menu

logger = logging.getLogger(__name__)

_SHEET_QUALIFIED_PATTERN = re.compile(r"^(?:'((?:[^']|'')+)'|([^!]+))!(.+)$")
_CELL_PATTERN = re.compile(r"^\$?([A-Z]{1,3})\$?(\d+)$")
_BOX_PATTERN = re.compile(r"^\$?([A-Z]{1,3})\$?(\d+):\$?([A-Z]{1,3})\$?(\d+)$")
_COLUMNS_PATTERN = re.compile(r"^\$?([A-Z]{1,3}):\$?([A-Z]{1,3})$")
_ROWS_PATTERN = re.compile(r"^\$?(\d+):\$?(\d+)$")


class WorkbookRange:
    """
    A selected range read out of a workbook.

    Both grids are read when the range is resolved, so the handle stays
    valid after the workbooks are closed.

    Attributes:
        cell_range: The resolved range (0-based bounds plus A1 label).
    """

    def __init__(
        self,
        sheet_name: str,
        cell_range: CellRange,
        values: list[list[Any]],
        formulas: list[list[str]],
    ) -> None:
        self._sheet_name = sheet_name
        self.cell_range = cell_range
        self._values = values
        self._formulas = formulas

    def values(self) -> list[list[Any]]:
        return [list(row) for row in self._values]

    def formulas(self) -> list[list[str]]:
        return [list(row) for row in self._formulas]

    def label(self) -> str:
        return self.cell_range.a1_notation or ""

    def sheet_name(self) -> str:
        return self._sheet_name

    def dimensions(self) -> tuple[int, int]:
        return (self.cell_range.row_count, self.cell_range.column_count)

    def __repr__(self) -> str:
        return f"WorkbookRange({self._sheet_name!r}, {self.label()!r})"


class OpenpyxlHost:
    """
    Host collaborator for a workbook file, using openpyxl.

    The host never writes to the workbook. UI surfaces have nowhere to go
    in a file, so alerts, dialogs and registered menus are recorded on the
    instance for the caller (REST or MCP transport) to relay.

    Attributes:
        SUPPORTED_EXTENSIONS: Tuple of supported file extensions.
        file_path: Path to the workbook.
        sheet_name: Sheet to export from, or None for the active sheet.
        selection: Explicit A1 range, or None for the saved selection.
        alerts: Alerts shown so far.
        dialogs: Dialogs shown so far.
        menus: Menus registered so far.

    Example:
        host = OpenpyxlHost("/path/to/book.xlsx", selection="Sheet1!B2:C3")
        selection = host.get_active_selection()
    """

    SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm")

    def __init__(
        self,
        file_path: str,
        sheet_name: str | None = None,
        selection: str | None = None,
    ) -> None:
        self.file_path = file_path
        self.sheet_name = sheet_name
        self.selection = selection
        self.alerts: list[Alert] = []
        self.dialogs: list[Dialog] = []
        self.menus: list[Menu] = []

    def _validate_file_path(self) -> Path:
        """
        Validate that the workbook exists and has a supported extension.

        Returns:
            Path object for the validated file.

        Raises:
            ExportFileNotFoundError: If the file does not exist.
            InvalidFileFormatError: If the file extension is not supported.
        """
        path = Path(self.file_path)

        if not path.exists():
            raise ExportFileNotFoundError(self.file_path)

        if path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            raise InvalidFileFormatError(
                file_path=self.file_path,
                expected_formats=list(self.SUPPORTED_EXTENSIONS),
                reason=f"Unsupported file extension: {path.suffix}",
            )

        return path

    def _open_workbook(self, path: Path, data_only: bool) -> Workbook:
        """
        Open the workbook using openpyxl.

        Args:
            path: Validated path to the workbook.
            data_only: If True, read cached values instead of formulas.

        Returns:
            Workbook instance.

        Raises:
            InvalidFileFormatError: If the file cannot be parsed.
            ReadError: If an unexpected error occurs during opening.
        """
        logger.debug("Opening %s (data_only=%s)", path, data_only)
        try:
            return load_workbook(str(path), data_only=data_only)
        except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            raise InvalidFileFormatError(
                file_path=self.file_path,
                reason=str(e),
            ) from e
        except Exception as e:
            raise ReadError(
                file_path=self.file_path,
                operation="open",
                reason=str(e),
            ) from e

    def _split_sheet_qualifier(self, a1_range: str) -> tuple[str | None, str]:
        """
        Split "Sheet1!B2:C3" or "'My Sheet'!B2" into sheet name and range.

        Returns:
            Tuple of (sheet name or None, range part).
        """
        match = _SHEET_QUALIFIED_PATTERN.match(a1_range.strip())
        if not match:
            return None, a1_range.strip()

        quoted, bare, reference = match.groups()
        sheet_name = quoted.replace("''", "'") if quoted is not None else bare
        return sheet_name, reference

    def _resolve_worksheet(self, workbook: Workbook, sheet_name: str | None) -> Worksheet:
        """
        Pick the worksheet to export from.

        Args:
            workbook: The open workbook.
            sheet_name: Requested sheet, or None for the active sheet.

        Raises:
            SheetNotFoundError: If the sheet does not exist or holds no cells.
        """
        available_sheets = [worksheet.title for worksheet in workbook.worksheets]

        if sheet_name is None:
            active = workbook.active
            if isinstance(active, Worksheet):
                return active
            if not available_sheets:
                raise SheetNotFoundError(
                    sheet_name="(active sheet)",
                    available_sheets=[],
                )
            return workbook.worksheets[0]

        if sheet_name not in available_sheets:
            raise SheetNotFoundError(
                sheet_name=sheet_name,
                available_sheets=available_sheets,
            )

        return workbook[sheet_name]

    def _saved_selection(self, worksheet: Worksheet) -> str | None:
        """
        Read the selection saved in the sheet view.

        With split or frozen panes the sheet view holds one selection per
        pane; the active pane's selection is the user's.

        Returns:
            The saved sqref, or None if the sheet records no selection.
        """
        sheet_view = worksheet.sheet_view
        selections = list(sheet_view.selection or [])
        if not selections:
            return None

        selection = selections[0]
        if sheet_view.pane is not None and sheet_view.pane.activePane:
            for candidate in selections:
                if candidate.pane == sheet_view.pane.activePane:
                    selection = candidate
                    break

        sqref = selection.sqref
        if sqref is None:
            return None
        sqref = str(sqref).strip()
        return sqref or None

    def _column_letter_to_index(self, column_letter: str) -> int:
        """
        Convert Excel column letter(s) to 0-based index.

        Args:
            column_letter: Column letter(s) like "A", "B", "AA", "AB".

        Returns:
            0-based column index.
        """
        result = 0
        for char in column_letter.upper():
            result = result * 26 + (ord(char) - ord("A") + 1)
        return result - 1

    def _row_number_to_index(self, row_number: str, a1_range: str) -> int:
        row = int(row_number)
        if row < 1:
            raise CellRangeError(
                cell_range=a1_range,
                reason="Row numbers start at 1",
            )
        return row - 1

    def _parse_a1_notation(self, a1_range: str, worksheet: Worksheet) -> CellRange:
        """
        Parse an A1 range into a CellRange.

        Supports formats like:
        - "B2" (single cell)
        - "B2:C3" (range)
        - "$B$2:$C$3" (absolute references)
        - "A:C" (whole columns, bounded by the sheet's used rows)
        - "2:4" (whole rows, bounded by the sheet's used columns)

        Args:
            a1_range: A1 notation string without a sheet qualifier.
            worksheet: Sheet used to bound whole-row/column ranges.

        Returns:
            CellRange whose a1_notation is the label shown to the user.

        Raises:
            CellRangeError: If the range notation is invalid.
        """
        reference = a1_range.strip().upper()

        cell_match = _CELL_PATTERN.match(reference)
        if cell_match:
            col = self._column_letter_to_index(cell_match.group(1))
            row = self._row_number_to_index(cell_match.group(2), a1_range)
            return CellRange(
                start_row=row,
                end_row=row,
                start_col=col,
                end_col=col,
                a1_notation=f"{cell_match.group(1)}{row + 1}",
            )

        box_match = _BOX_PATTERN.match(reference)
        if box_match:
            start_col = self._column_letter_to_index(box_match.group(1))
            start_row = self._row_number_to_index(box_match.group(2), a1_range)
            end_col = self._column_letter_to_index(box_match.group(3))
            end_row = self._row_number_to_index(box_match.group(4), a1_range)

            if start_row > end_row or start_col > end_col:
                raise CellRangeError(
                    cell_range=a1_range,
                    reason="Start position must be before end position",
                )

            start_label = f"{box_match.group(1)}{start_row + 1}"
            end_label = f"{box_match.group(3)}{end_row + 1}"
            label = start_label if start_label == end_label else f"{start_label}:{end_label}"

            return CellRange(
                start_row=start_row,
                end_row=end_row,
                start_col=start_col,
                end_col=end_col,
                a1_notation=label,
            )

        columns_match = _COLUMNS_PATTERN.match(reference)
        if columns_match:
            start_col = self._column_letter_to_index(columns_match.group(1))
            end_col = self._column_letter_to_index(columns_match.group(2))
            if start_col > end_col:
                raise CellRangeError(
                    cell_range=a1_range,
                    reason="Start column must be before end column",
                )
            return CellRange(
                start_row=0,
                end_row=max(worksheet.max_row, 1) - 1,
                start_col=start_col,
                end_col=end_col,
                a1_notation=f"{columns_match.group(1)}:{columns_match.group(2)}",
            )

        rows_match = _ROWS_PATTERN.match(reference)
        if rows_match:
            start_row = self._row_number_to_index(rows_match.group(1), a1_range)
            end_row = self._row_number_to_index(rows_match.group(2), a1_range)
            if start_row > end_row:
                raise CellRangeError(
                    cell_range=a1_range,
                    reason="Start row must be before end row",
                )
            return CellRange(
                start_row=start_row,
                end_row=end_row,
                start_col=0,
                end_col=max(worksheet.max_column, 1) - 1,
                a1_notation=f"{start_row + 1}:{end_row + 1}",
            )

        raise CellRangeError(
            cell_range=a1_range,
            reason="Invalid A1 notation format. Expected format: 'A1', 'A1:C10', 'A:C' or '1:3'",
        )

    def _normalize_cell_value(self, cell: Cell) -> Any:
        """
        Normalize a cached cell value to a JSON-friendly Python value.

        Empty cells read as empty strings and whole floats as integers,
        the way a spreadsheet host reports them.

        Args:
            cell: Cell object from the data_only workbook.

        Returns:
            Normalized Python value.
        """
        value = cell.value

        if value is None:
            return ""

        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            return value

        if isinstance(value, (str, int, bool, datetime, date, time, timedelta)):
            return value

        return str(value)

    def _formula_text(self, cell: Cell) -> str:
        """
        Return the formula text of a cell, or "" for a literal.

        Args:
            cell: Cell object from the formula workbook.
        """
        value = cell.value

        if isinstance(value, ArrayFormula):
            return value.text or ""

        if cell.data_type == "f" and value is not None:
            return str(value)

        return ""

    def _read_grid(self, worksheet: Worksheet, cell_range: CellRange, reader) -> list[list[Any]]:
        return [
            [reader(cell) for cell in row]
            for row in worksheet.iter_rows(
                min_row=cell_range.start_row + 1,
                max_row=cell_range.end_row + 1,
                min_col=cell_range.start_col + 1,
                max_col=cell_range.end_col + 1,
            )
        ]

    # ==================== HOST COLLABORATOR ====================

    def get_active_selection(self) -> WorkbookRange | None:
        """
        Resolve the selection and read its values and formulas.

        Returns:
            The selected range, or None if the sheet records no selection.

        Raises:
            ExportFileNotFoundError: If the workbook does not exist.
            InvalidFileFormatError: If the file is not a supported workbook.
            SheetNotFoundError: If the requested sheet does not exist.
            CellRangeError: If the explicit range is not valid A1 notation.
            InvalidSelectionError: If several disjoint ranges are selected.
        """
        path = self._validate_file_path()

        formula_workbook = self._open_workbook(path, data_only=False)
        try:
            requested_sheet = self.sheet_name
            reference = None

            if self.selection is not None and self.selection.strip():
                qualifier, reference = self._split_sheet_qualifier(self.selection)
                if qualifier is not None:
                    requested_sheet = qualifier

            formula_sheet = self._resolve_worksheet(formula_workbook, requested_sheet)

            if reference is None:
                reference = self._saved_selection(formula_sheet)
                if reference is None:
                    return None

            if " " in reference.strip() or "," in reference:
                raise InvalidSelectionError(reason="multiple ranges are selected")

            cell_range = self._parse_a1_notation(reference, formula_sheet)
            formulas = self._read_grid(formula_sheet, cell_range, self._formula_text)
            sheet_title = formula_sheet.title
        finally:
            formula_workbook.close()

        value_workbook = self._open_workbook(path, data_only=True)
        try:
            value_sheet = value_workbook[sheet_title]
            values = self._read_grid(value_sheet, cell_range, self._normalize_cell_value)
        except Exception as e:
            raise ReadError(
                file_path=self.file_path,
                operation="read values from",
                reason=str(e),
            ) from e
        finally:
            value_workbook.close()

        logger.debug(
            "Resolved selection %s!%s (%d rows x %d columns)",
            sheet_title,
            cell_range.a1_notation,
            cell_range.row_count,
            cell_range.column_count,
        )

        return WorkbookRange(
            sheet_name=sheet_title,
            cell_range=cell_range,
            values=values,
            formulas=formulas,
        )

    def show_alert(self, message: str) -> None:
        self.alerts.append(Alert(message=message))

    def show_dialog(self, dialog: Dialog) -> None:
        self.dialogs.append(dialog)

    def register_menu(self, menu: Menu) -> None:
        self.menus.append(menu)
