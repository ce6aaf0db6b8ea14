"""
Clipboard presenter.

Shows exported JSON in a fixed-size modal dialog so the user can copy it.
The presenter never writes to the clipboard itself; hosts do not let
scripts do that, so the copy is left to the user.
"""

from src.adapters.host import HostCollaborator
from src.config import Settings, get_settings
from src.models.export_models import Dialog


class ClipboardPresenter:
    """
    Presents JSON text through the host's modal dialog.

    Attributes:
        host: Host whose dialog surface is used.
        title: Dialog title.
        width: Dialog width in logical units.
        height: Dialog height in logical units.
    """

    def __init__(self, host: HostCollaborator, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.host = host
        self.title = settings.dialog_title
        self.width = settings.dialog_width
        self.height = settings.dialog_height

    def present(self, json_text: str, label: str) -> Dialog:
        """
        Show the JSON text in a modal dialog.

        Args:
            json_text: Rendered export document.
            label: What was exported, e.g. "Values".

        Returns:
            The dialog handed to the host.
        """
        dialog = Dialog(
            title=self.title,
            label=label,
            body=json_text,
            width=self.width,
            height=self.height,
        )
        self.host.show_dialog(dialog)
        return dialog
