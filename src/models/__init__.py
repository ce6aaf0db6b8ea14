"""
Data models for the export service.

Contains Pydantic models for export documents, host UI surfaces, and
request/response validation and serialization.
"""

from src.models.export_models import (
    Alert,
    CellRange,
    CombinedExportDocument,
    Dialog,
    Dimensions,
    ExportDocument,
    ExportErrorResponse,
    ExportMetadata,
    ExportRequest,
    ExportResponse,
    ExportType,
    FormulasExportDocument,
    Menu,
    MenuItem,
    ValuesExportDocument,
)

__all__ = [
    "ExportType",
    "CellRange",
    "Dimensions",
    "ExportMetadata",
    "ValuesExportDocument",
    "FormulasExportDocument",
    "CombinedExportDocument",
    "ExportDocument",
    "Menu",
    "MenuItem",
    "Alert",
    "Dialog",
    "ExportRequest",
    "ExportResponse",
    "ExportErrorResponse",
]
