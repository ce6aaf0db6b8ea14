"""
In-memory host collaborator for tests.

FakeRange and FakeHost implement the RangeHandle and HostCollaborator
protocols without any workbook behind them.
"""

from datetime import datetime, timezone
from typing import Any

from src.exceptions.export_exceptions import InvalidSelectionError
from src.models.export_models import Alert, Dialog, Menu

FIXED_INSTANT = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


class FakeRange:
    """In-memory RangeHandle."""

    def __init__(
        self,
        values: list[list[Any]],
        formulas: list[list[str]] | None = None,
        label: str = "B2:C3",
        sheet_name: str = "Sheet1",
    ) -> None:
        self._values = values
        self._formulas = formulas if formulas is not None else [["" for _ in row] for row in values]
        self._label = label
        self._sheet_name = sheet_name

    def values(self) -> list[list[Any]]:
        return [list(row) for row in self._values]

    def formulas(self) -> list[list[str]]:
        return [list(row) for row in self._formulas]

    def label(self) -> str:
        return self._label

    def sheet_name(self) -> str:
        return self._sheet_name

    def dimensions(self) -> tuple[int, int]:
        rows = len(self._values)
        return (rows, len(self._values[0]) if rows else 0)


class FakeHost:
    """In-memory HostCollaborator that records every UI surface it is asked to show."""

    def __init__(
        self,
        selection: FakeRange | None = None,
        selection_error: InvalidSelectionError | None = None,
    ) -> None:
        self.selection = selection
        self.selection_error = selection_error
        self.alerts: list[Alert] = []
        self.dialogs: list[Dialog] = []
        self.menus: list[Menu] = []

    def get_active_selection(self) -> FakeRange | None:
        if self.selection_error is not None:
            raise self.selection_error
        return self.selection

    def show_alert(self, message: str) -> None:
        self.alerts.append(Alert(message=message))

    def show_dialog(self, dialog: Dialog) -> None:
        self.dialogs.append(dialog)

    def register_menu(self, menu: Menu) -> None:
        self.menus.append(menu)

