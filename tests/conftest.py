"""
Test fixtures and utilities for the export service tests.

This module provides an in-memory host, a fixed clock, and workbook files
authored with XlsxWriter (which stores cached formula results and saved
selections the way Excel does).
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import xlsxwriter
from openpyxl import Workbook

from src.config import Settings
from src.services.export_service import ExportService
from tests.fakes import FIXED_INSTANT, FakeHost, FakeRange


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_INSTANT."""
    return lambda: FIXED_INSTANT


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sample_range() -> FakeRange:
    """The B2:C3 selection holding [[1, 2], [3, 4]] and no formulas."""
    return FakeRange(values=[[1, 2], [3, 4]])


@pytest.fixture
def fake_host(sample_range: FakeRange) -> FakeHost:
    """A host whose active selection is sample_range."""
    return FakeHost(selection=sample_range)


@pytest.fixture
def export_service(fake_host: FakeHost, settings: Settings, fixed_clock) -> ExportService:
    """An ExportService over fake_host with a fixed clock."""
    return ExportService(fake_host, settings=settings, clock=fixed_clock)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_workbook(temp_dir: Path) -> Path:
    """
    Create a workbook with saved selections.

    Sheet1 (active): B2:C3 = [[1, 2], [3, 4]], selection B2:C3.
    Totals: A1=10, B1="label", A2=32, B2=TRUE, A3==SUM(A1:A2) cached as 42,
    B3 empty; selection A1:B3.

    Returns:
        Path to the workbook.
    """
    file_path = temp_dir / "sample.xlsx"

    workbook = xlsxwriter.Workbook(str(file_path))

    sheet = workbook.add_worksheet("Sheet1")
    sheet.write_row("B2", [1, 2])
    sheet.write_row("B3", [3, 4])
    sheet.set_selection("B2:C3")

    totals = workbook.add_worksheet("Totals")
    totals.write_number("A1", 10)
    totals.write_string("B1", "label")
    totals.write_number("A2", 32)
    totals.write_boolean("B2", True)
    totals.write_formula("A3", "=SUM(A1:A2)", None, 42)
    totals.set_selection("A1:B3")

    workbook.close()

    return file_path


@pytest.fixture
def multi_area_workbook(temp_dir: Path) -> Path:
    """
    Create a workbook whose saved selection spans two disjoint areas.

    Returns:
        Path to the workbook.
    """
    file_path = temp_dir / "multi_area.xlsx"

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Sheet1"
    worksheet["A1"] = 1
    worksheet["C1"] = 2
    worksheet.sheet_view.selection[0].sqref = "A1:A2 C1:C2"
    workbook.save(str(file_path))

    return file_path
