"""
JSON builders for range exports.

Three pure functions map a selected range to an export document, one per
export type. They read only from the RangeHandle they are given and never
fail for a non-empty range. The clock is injectable so that two builds of
the same range can be compared.

Example:
    document = build_values(selection)
    text = render_document(document)
"""

from collections.abc import Callable
from datetime import datetime, timezone

from src.adapters.host import RangeHandle
from src.models.export_models import (
    CombinedExportDocument,
    Dimensions,
    ExportDocument,
    ExportMetadata,
    ExportType,
    FormulasExportDocument,
    ValuesExportDocument,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(timezone.utc)


def build_metadata(
    selection: RangeHandle,
    export_type: ExportType,
    clock: Clock = utc_now,
) -> ExportMetadata:
    """
    Build the metadata block shared by all export types.

    Args:
        selection: The range being exported.
        export_type: Tag recorded in exportType.
        clock: Source of the exportedAt instant.

    Returns:
        ExportMetadata for the range.
    """
    rows, columns = selection.dimensions()
    return ExportMetadata(
        sheet_name=selection.sheet_name(),
        range=selection.label(),
        dimensions=Dimensions(rows=rows, columns=columns),
        exported_at=clock(),
        export_type=export_type,
    )


def build_values(selection: RangeHandle, clock: Clock = utc_now) -> ValuesExportDocument:
    """Build a values export: metadata plus the cell value grid as data."""
    return ValuesExportDocument(
        metadata=build_metadata(selection, ExportType.VALUES, clock),
        data=selection.values(),
    )


def build_formulas(selection: RangeHandle, clock: Clock = utc_now) -> FormulasExportDocument:
    """Build a formulas export: metadata plus the formula grid as data."""
    return FormulasExportDocument(
        metadata=build_metadata(selection, ExportType.FORMULAS, clock),
        data=selection.formulas(),
    )


def build_combined(selection: RangeHandle, clock: Clock = utc_now) -> CombinedExportDocument:
    """Build a combined export carrying both the value and formula grids."""
    return CombinedExportDocument(
        metadata=build_metadata(selection, ExportType.COMBINED, clock),
        values=selection.values(),
        formulas=selection.formulas(),
    )


BUILDERS: dict[ExportType, Callable[[RangeHandle, Clock], ExportDocument]] = {
    ExportType.VALUES: build_values,
    ExportType.FORMULAS: build_formulas,
    ExportType.COMBINED: build_combined,
}


def render_document(document: ExportDocument, indent: int = 2) -> str:
    """
    Render an export document as indented JSON text.

    Keys use their camelCase names in declaration order, so metadata always
    reads sheetName, range, dimensions, exportedAt, exportType.

    Args:
        document: Document produced by one of the builders.
        indent: Spaces per indentation level.

    Returns:
        The JSON text.
    """
    return document.model_dump_json(indent=indent, by_alias=True)
