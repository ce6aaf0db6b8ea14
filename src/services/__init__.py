"""
Service layer for range exports.

Contains the menu installer, export triggers, JSON builders and clipboard
presenter, decoupled from transport layers (HTTP/MCP) and from any
particular spreadsheet host.
"""

from src.services.builders import (
    build_combined,
    build_formulas,
    build_values,
    render_document,
)
from src.services.export_service import ExportService, build_menu
from src.services.presenter import ClipboardPresenter

__all__ = [
    "ExportService",
    "ClipboardPresenter",
    "build_menu",
    "build_values",
    "build_formulas",
    "build_combined",
    "render_document",
]
