"""
Host collaborator interface.

The export core never talks to a spreadsheet application directly. It
depends on the two protocols below, which a host adapter implements:

    - RangeHandle: a single rectangular selection in a named sheet
    - HostCollaborator: the host's selection and UI surfaces

OpenpyxlHost implements them over a workbook file; tests supply an
in-memory fake.
"""

from typing import Any, Protocol, runtime_checkable

from src.models.export_models import Dialog, Menu


@runtime_checkable
class RangeHandle(Protocol):
    """A contiguous rectangular block of cells the user selected."""

    def values(self) -> list[list[Any]]:
        """Cell values, one list per row."""
        ...

    def formulas(self) -> list[list[str]]:
        """Formula text per cell, empty string where the cell is a literal."""
        ...

    def label(self) -> str:
        """A1 label of the range (e.g., "B2:C3")."""
        ...

    def sheet_name(self) -> str:
        """Name of the sheet holding the range."""
        ...

    def dimensions(self) -> tuple[int, int]:
        """(rows, columns) of the range."""
        ...


@runtime_checkable
class HostCollaborator(Protocol):
    """The spreadsheet host: current selection plus modal UI surfaces."""

    def get_active_selection(self) -> RangeHandle | None:
        """
        Return the user's current selection.

        Returns:
            The selected range, or None when nothing is selected.

        Raises:
            InvalidSelectionError: If the selection exists but cannot be
                exported as a single range.
        """
        ...

    def show_alert(self, message: str) -> None:
        """Show a blocking informational alert."""
        ...

    def show_dialog(self, dialog: Dialog) -> None:
        """Show a modal dialog."""
        ...

    def register_menu(self, menu: Menu) -> None:
        """Add a top-level menu to the host UI."""
        ...
