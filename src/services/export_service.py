"""
Core export service.

This module provides the ExportService class, which wires the host menu to
the three export triggers and the triggers to the JSON builders and the
clipboard presenter:

    menu installer -> export trigger -> JSON builder -> clipboard presenter

The service holds no state between actions beyond whether its menu has
been registered. It is transport-agnostic: the REST API and the MCP server
both drive it through a per-request host.

Example:
    host = OpenpyxlHost("/path/to/book.xlsx")
    service = ExportService(host)
    service.on_open()

    # Triggers take the selection explicitly
    service.export_values(host.get_active_selection())

    # Or resolve it from the host, as a menu click does
    dialog = service.run_action("export_both")
"""

import logging

from src.adapters.host import HostCollaborator, RangeHandle
from src.config import Settings, get_settings
from src.exceptions.export_exceptions import InvalidSelectionError, UnknownActionError
from src.models.export_models import Dialog, ExportType, Menu, MenuItem
from src.services.builders import BUILDERS, Clock, render_document, utc_now
from src.services.presenter import ClipboardPresenter

logger = logging.getLogger(__name__)

EXPORT_LABELS: dict[ExportType, str] = {
    ExportType.VALUES: "Values",
    ExportType.FORMULAS: "Formulas",
    ExportType.COMBINED: "Values and Formulas",
}

# (menu label, action name, export type), in menu order
MENU_ACTIONS: tuple[tuple[str, str, ExportType], ...] = (
    ("Copy Values (JSON)", "export_values", ExportType.VALUES),
    ("Copy Formulas (JSON)", "export_formulas", ExportType.FORMULAS),
    ("Copy Both (JSON)", "export_both", ExportType.COMBINED),
)

ACTION_EXPORT_TYPES: dict[str, ExportType] = {
    action: export_type for _, action, export_type in MENU_ACTIONS
}


def build_menu(settings: Settings | None = None) -> Menu:
    """
    Describe the export menu.

    Args:
        settings: Settings supplying the menu title.

    Returns:
        Menu with one item per export trigger.
    """
    settings = settings or get_settings()
    return Menu(
        title=settings.menu_title,
        items=[MenuItem(label=label, action=action) for label, action, _ in MENU_ACTIONS],
    )


class ExportService:
    """
    Menu installer and export triggers for a single host.

    Attributes:
        host: The host collaborator supplying selections and UI surfaces.
        presenter: Presenter used to show exported JSON.
        settings: Application settings.
        clock: Source of the exportedAt instant.

    Example:
        service = ExportService(host)
        service.on_open()
        service.run_action("export_values")
    """

    def __init__(
        self,
        host: HostCollaborator,
        presenter: ClipboardPresenter | None = None,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.settings = settings or get_settings()
        self.host = host
        self.presenter = presenter or ClipboardPresenter(host, self.settings)
        self.clock = clock
        self._menu: Menu | None = None

    # ==================== MENU INSTALLER ====================

    def on_open(self) -> Menu:
        """
        Register the export menu with the host.

        Called once when the host document opens; repeated calls return the
        already registered menu without registering it again.

        Returns:
            The registered menu.
        """
        if self._menu is None:
            self._menu = build_menu(self.settings)
            self.host.register_menu(self._menu)
        return self._menu

    def run_action(self, action: str) -> Dialog | None:
        """
        Run a menu action against the host's current selection.

        Args:
            action: Action name from the menu (e.g. "export_values").

        Returns:
            The dialog shown, or None if the user was alerted instead.

        Raises:
            UnknownActionError: If no trigger has that name.
        """
        export_type = ACTION_EXPORT_TYPES.get(action)
        if export_type is None:
            raise UnknownActionError(
                action=action,
                available_actions=list(ACTION_EXPORT_TYPES),
            )
        return self.run(export_type)

    def run(self, export_type: ExportType) -> Dialog | None:
        """
        Export the host's current selection.

        Returns:
            The dialog shown, or None if the user was alerted instead.
        """
        try:
            selection = self.host.get_active_selection()
        except InvalidSelectionError as e:
            self.host.show_alert(e.message)
            return None
        return self.export(export_type, selection)

    # ==================== EXPORT TRIGGERS ====================

    def export_values(self, selection: RangeHandle | None) -> None:
        """Export the selection's values."""
        self.export(ExportType.VALUES, selection)

    def export_formulas(self, selection: RangeHandle | None) -> None:
        """Export the selection's formulas."""
        self.export(ExportType.FORMULAS, selection)

    def export_both(self, selection: RangeHandle | None) -> None:
        """Export the selection's values and formulas together."""
        self.export(ExportType.COMBINED, selection)

    def export(self, export_type: ExportType, selection: RangeHandle | None) -> Dialog | None:
        """
        Build, render and present one export.

        Without a selection the user gets an alert and nothing else happens.

        Args:
            export_type: Which document to build.
            selection: The selected range, or None.

        Returns:
            The dialog shown, or None if the user was alerted instead.
        """
        if selection is None:
            self.host.show_alert(InvalidSelectionError().message)
            return None

        document = BUILDERS[export_type](selection, self.clock)
        json_text = render_document(document, indent=self.settings.json_indent)

        logger.info(
            "Exported %s of %s!%s",
            export_type.value,
            document.metadata.sheet_name,
            document.metadata.range,
        )

        return self.presenter.present(json_text, EXPORT_LABELS[export_type])
