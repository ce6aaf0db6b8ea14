"""
Tests for the OpenpyxlHost.

Tests selection resolution, value and formula reads, and error mapping
for workbook files.
"""

from pathlib import Path

import pytest
from openpyxl import Workbook

from src.adapters.host import HostCollaborator, RangeHandle
from src.adapters.openpyxl_adapter import OpenpyxlHost
from src.exceptions.export_exceptions import (
    CellRangeError,
    InvalidFileFormatError,
    InvalidSelectionError,
    SheetNotFoundError,
)
from src.exceptions.export_exceptions import FileNotFoundError as ExportFileNotFoundError


class TestOpenpyxlHostFileValidation:
    """Tests for file validation in OpenpyxlHost."""

    def test_file_not_found_raises_error(self) -> None:
        """Test that a missing workbook raises FileNotFoundError."""
        host = OpenpyxlHost("/nonexistent/file.xlsx")

        with pytest.raises(ExportFileNotFoundError) as exc_info:
            host.get_active_selection()

        assert exc_info.value.error_code == "FILE_NOT_FOUND"
        assert "/nonexistent/file.xlsx" in exc_info.value.message

    def test_invalid_extension_raises_error(self, temp_dir: Path) -> None:
        """Test that a non-workbook extension raises InvalidFileFormatError."""
        invalid_file = temp_dir / "test.txt"
        invalid_file.write_text("This is not a workbook")

        with pytest.raises(InvalidFileFormatError) as exc_info:
            OpenpyxlHost(str(invalid_file)).get_active_selection()

        assert exc_info.value.error_code == "INVALID_FILE_FORMAT"
        assert ".txt" in exc_info.value.message

    def test_corrupt_workbook_raises_error(self, temp_dir: Path) -> None:
        """Test that a file with the right extension but no workbook inside fails cleanly."""
        corrupt_file = temp_dir / "corrupt.xlsx"
        corrupt_file.write_text("not a zip archive")

        with pytest.raises(InvalidFileFormatError):
            OpenpyxlHost(str(corrupt_file)).get_active_selection()


class TestOpenpyxlHostSelection:
    """Tests for resolving the selection."""

    def test_implements_host_protocols(self, sample_workbook: Path) -> None:
        """Test that the host and its ranges satisfy the collaborator protocols."""
        host = OpenpyxlHost(str(sample_workbook))

        assert isinstance(host, HostCollaborator)
        assert isinstance(host.get_active_selection(), RangeHandle)

    def test_saved_selection_on_active_sheet(self, sample_workbook: Path) -> None:
        """Test that the saved selection of the active sheet is used by default."""
        selection = OpenpyxlHost(str(sample_workbook)).get_active_selection()

        assert selection is not None
        assert selection.sheet_name() == "Sheet1"
        assert selection.label() == "B2:C3"
        assert selection.dimensions() == (2, 2)
        assert selection.values() == [[1, 2], [3, 4]]
        assert selection.formulas() == [["", ""], ["", ""]]

    def test_saved_selection_on_named_sheet(self, sample_workbook: Path) -> None:
        """Test values and formulas of the saved selection on another sheet."""
        selection = OpenpyxlHost(str(sample_workbook), sheet_name="Totals").get_active_selection()

        assert selection is not None
        assert selection.label() == "A1:B3"
        assert selection.dimensions() == (3, 2)
        assert selection.values() == [[10, "label"], [32, True], [42, ""]]
        assert selection.formulas() == [["", ""], ["", ""], ["=SUM(A1:A2)", ""]]

    def test_explicit_range(self, sample_workbook: Path) -> None:
        """Test that an explicit range overrides the saved selection."""
        host = OpenpyxlHost(str(sample_workbook), selection="C2:C3")

        selection = host.get_active_selection()

        assert selection.label() == "C2:C3"
        assert selection.values() == [[2], [4]]

    def test_explicit_single_cell(self, sample_workbook: Path) -> None:
        """Test that a single-cell range yields 1x1 grids."""
        host = OpenpyxlHost(str(sample_workbook), sheet_name="Totals", selection="A3")

        selection = host.get_active_selection()

        assert selection.label() == "A3"
        assert selection.dimensions() == (1, 1)
        assert selection.values() == [[42]]
        assert selection.formulas() == [["=SUM(A1:A2)"]]

    def test_single_cell_box_is_labelled_as_cell(self, sample_workbook: Path) -> None:
        """Test that "B2:B2" is labelled "B2"."""
        selection = OpenpyxlHost(str(sample_workbook), selection="b2:b2").get_active_selection()

        assert selection.label() == "B2"

    def test_absolute_references(self, sample_workbook: Path) -> None:
        """Test that $-anchored references are accepted."""
        selection = OpenpyxlHost(str(sample_workbook), selection="$B$2:$C$2").get_active_selection()

        assert selection.label() == "B2:C2"
        assert selection.values() == [[1, 2]]

    def test_sheet_qualified_range(self, sample_workbook: Path) -> None:
        """Test that a sheet-qualified range selects that sheet."""
        selection = OpenpyxlHost(str(sample_workbook), selection="Totals!A1:A3").get_active_selection()

        assert selection.sheet_name() == "Totals"
        assert selection.values() == [[10], [32], [42]]

    def test_quoted_sheet_qualified_range(self, sample_workbook: Path) -> None:
        """Test a quoted sheet name in the qualifier."""
        selection = OpenpyxlHost(str(sample_workbook), selection="'Totals'!B1").get_active_selection()

        assert selection.sheet_name() == "Totals"
        assert selection.values() == [["label"]]

    def test_whole_columns(self, sample_workbook: Path) -> None:
        """Test that whole columns are bounded by the used rows."""
        selection = OpenpyxlHost(str(sample_workbook), selection="B:C").get_active_selection()

        assert selection.label() == "B:C"
        assert selection.dimensions() == (3, 2)
        assert selection.values() == [["", ""], [1, 2], [3, 4]]

    def test_whole_rows(self, sample_workbook: Path) -> None:
        """Test that whole rows are bounded by the used columns."""
        selection = OpenpyxlHost(str(sample_workbook), selection="2:3").get_active_selection()

        assert selection.label() == "2:3"
        assert selection.dimensions() == (2, 3)
        assert selection.values() == [["", 1, 2], ["", 3, 4]]

    def test_multi_area_selection_raises(self, multi_area_workbook: Path) -> None:
        """Test that a selection of disjoint areas is rejected."""
        with pytest.raises(InvalidSelectionError) as exc_info:
            OpenpyxlHost(str(multi_area_workbook)).get_active_selection()

        assert exc_info.value.error_code == "INVALID_SELECTION"
        assert "multiple ranges" in exc_info.value.message

    def test_sheet_not_found_raises_error(self, sample_workbook: Path) -> None:
        """Test that an unknown sheet raises SheetNotFoundError."""
        with pytest.raises(SheetNotFoundError) as exc_info:
            OpenpyxlHost(str(sample_workbook), sheet_name="Missing").get_active_selection()

        assert exc_info.value.error_code == "SHEET_NOT_FOUND"
        assert exc_info.value.available_sheets == ["Sheet1", "Totals"]

    @pytest.mark.parametrize("cell_range", ["A1:", "C3:B2", "A0", "1A", "B:A"])
    def test_invalid_range_raises_error(self, sample_workbook: Path, cell_range: str) -> None:
        """Test that malformed or reversed ranges raise CellRangeError."""
        with pytest.raises(CellRangeError) as exc_info:
            OpenpyxlHost(str(sample_workbook), selection=cell_range).get_active_selection()

        assert exc_info.value.error_code == "INVALID_CELL_RANGE"

    def test_saved_selection_missing(self) -> None:
        """Test that a sheet view without a selection reads as no selection."""
        worksheet = Workbook().active
        worksheet.sheet_view.selection = []

        assert OpenpyxlHost("unused.xlsx")._saved_selection(worksheet) is None

    def test_saved_selection_without_sqref(self) -> None:
        """Test that a selection with no cell reference reads as no selection."""
        worksheet = Workbook().active
        worksheet.sheet_view.selection[0].sqref = None

        assert OpenpyxlHost("unused.xlsx")._saved_selection(worksheet) is None

    def test_no_saved_selection_returns_none(
        self,
        sample_workbook: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that get_active_selection returns None when nothing is selected."""
        host = OpenpyxlHost(str(sample_workbook))
        monkeypatch.setattr(host, "_saved_selection", lambda worksheet: None)

        assert host.get_active_selection() is None


class TestOpenpyxlHostCellValues:
    """Tests for cell value and formula normalization."""

    def test_integral_float_becomes_int(self) -> None:
        """Test that whole floats are reported as integers."""
        worksheet = Workbook().active
        worksheet["A1"] = 2.0
        worksheet["A2"] = 2.5

        host = OpenpyxlHost("unused.xlsx")

        assert host._normalize_cell_value(worksheet["A1"]) == 2
        assert isinstance(host._normalize_cell_value(worksheet["A1"]), int)
        assert host._normalize_cell_value(worksheet["A2"]) == 2.5

    def test_empty_cell_becomes_empty_string(self) -> None:
        """Test that empty cells are reported as empty strings."""
        worksheet = Workbook().active

        assert OpenpyxlHost("unused.xlsx")._normalize_cell_value(worksheet["C3"]) == ""

    def test_formula_text(self) -> None:
        """Test that formula cells yield their text and literals yield ""."""
        worksheet = Workbook().active
        worksheet["A1"] = 5
        worksheet["A2"] = "=A1*2"

        host = OpenpyxlHost("unused.xlsx")

        assert host._formula_text(worksheet["A1"]) == ""
        assert host._formula_text(worksheet["A2"]) == "=A1*2"


class TestOpenpyxlHostSurfaces:
    """Tests for recorded UI surfaces."""

    def test_alerts_are_recorded(self) -> None:
        """Test that alerts are kept on the host."""
        host = OpenpyxlHost("unused.xlsx")

        host.show_alert("Please select a range first.")

        assert [alert.message for alert in host.alerts] == ["Please select a range first."]
