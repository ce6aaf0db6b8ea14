"""
FastAPI application for range exports.

This module exposes the export menu over REST. Each request opens the
workbook it names as a host, runs one export trigger against that host's
selection, and returns what the host dialog would have shown.

API Endpoints:
    - GET /health: Health check
    - GET /menu: The export menu and its actions
    - POST /export/{export_type}: Export values, formulas or both as JSON
    - POST /export/{export_type}/dialog: The same export rendered as the HTML dialog

Example:
    To run the server:
        uvicorn src.main:app --reload

    Or programmatically:
        from src.main import run_server
        run_server()
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from src import __version__
from src.adapters.openpyxl_adapter import OpenpyxlHost
from src.config import Settings, configure_logging, get_settings
from src.exceptions.export_exceptions import ExportServiceError
from src.models.export_models import (
    Dialog,
    ExportErrorResponse,
    ExportRequest,
    ExportResponse,
    ExportType,
    Menu,
)
from src.services.export_service import ExportService, build_menu

logger = logging.getLogger(__name__)

settings: Settings | None = None

ERROR_STATUS_CODES = {
    "INVALID_SELECTION": 400,
    "INVALID_CELL_RANGE": 400,
    "INVALID_FILE_FORMAT": 400,
    "FILE_NOT_FOUND": 404,
    "SHEET_NOT_FOUND": 404,
    "UNKNOWN_ACTION": 404,
    "READ_ERROR": 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Loads settings on startup and drops them on shutdown.

    Args:
        app: The FastAPI application instance.
    """
    global settings
    settings = get_settings()
    yield
    settings = None


app = FastAPI(
    title="Sheet JSON Export Service",
    description="""
    Export the selected range of a workbook as JSON, over REST or MCP.

    ## Features

    - **Values**: the cached cell values of the selection
    - **Formulas**: the formula text of each cell (empty for literals)
    - **Combined**: values and formulas side by side
    - **Selections**: the selection saved in the workbook, or any A1 range

    ## Output

    Every export is a JSON document with a `metadata` block (sheet name,
    range, dimensions, export time and type) followed by the payload.
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_app_settings() -> Settings:
    """
    Get the settings loaded at startup.

    Returns:
        The application Settings.

    Raises:
        HTTPException: If the application has not started.
    """
    if settings is None:
        raise HTTPException(
            status_code=503,
            detail="Export service is not initialized",
        )
    return settings


def error_response(error_code: str, message: str, details: dict | None = None) -> HTTPException:
    """
    Build an HTTPException carrying the standard error envelope.

    Args:
        error_code: Machine-readable error code.
        message: Human-readable error description.
        details: Additional error context.

    Returns:
        HTTPException with the mapped status code.
    """
    return HTTPException(
        status_code=ERROR_STATUS_CODES.get(error_code, 500),
        detail=ExportErrorResponse(
            success=False,
            error_code=error_code,
            message=message,
            details=details,
        ).model_dump(),
    )


def run_export(request: ExportRequest, export_type: ExportType) -> Dialog:
    """
    Run one export against the workbook named in the request.

    Args:
        request: Workbook, sheet and optional range to export.
        export_type: Which export trigger to run.

    Returns:
        The dialog the host was asked to show.

    Raises:
        HTTPException: If the selection is invalid or the workbook cannot be read.
    """
    host = OpenpyxlHost(
        file_path=request.file_path,
        sheet_name=request.sheet_name,
        selection=request.cell_range,
    )
    service = ExportService(host, settings=get_app_settings())
    service.on_open()

    try:
        dialog = service.run(export_type)
    except ExportServiceError as e:
        raise error_response(e.error_code, e.message, e.details) from e

    if dialog is None:
        raise error_response("INVALID_SELECTION", host.alerts[-1].message)

    return dialog


@app.get(
    "/health",
    tags=["System"],
    summary="Health check",
    response_model=dict,
)
async def health_check() -> dict[str, Any]:
    """
    Check the health status of the service.

    Returns:
        Dictionary containing status and timestamp.
    """
    return {
        "status": "healthy",
        "service": "Sheet JSON Export Service",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get(
    "/menu",
    tags=["Menu"],
    summary="Get the export menu",
    response_model=Menu,
)
async def get_menu() -> Menu:
    """
    Describe the export menu a host would show.

    Returns:
        Menu with one item per export action.
    """
    return build_menu(get_app_settings())


@app.post(
    "/export/{export_type}",
    tags=["Export"],
    summary="Export a range as JSON",
    response_model=ExportResponse,
    responses={
        400: {"model": ExportErrorResponse, "description": "Invalid selection, range or file"},
        404: {"model": ExportErrorResponse, "description": "File or sheet not found"},
        500: {"model": ExportErrorResponse, "description": "Read error"},
    },
)
async def export_range(export_type: ExportType, request: ExportRequest) -> ExportResponse:
    """
    Export the selected range of a workbook.

    Without a cell_range the selection saved in the workbook is used, the
    same range the user had selected when the file was last saved.

    Args:
        export_type: values, formulas or combined.
        request: Workbook path, optional sheet and optional A1 range.

    Returns:
        ExportResponse with the JSON text and parsed document.
    """
    dialog = run_export(request, export_type)

    return ExportResponse(
        success=True,
        export_type=export_type,
        title=dialog.title,
        label=dialog.label,
        width=dialog.width,
        height=dialog.height,
        json_text=dialog.body,
        document=json.loads(dialog.body),
    )


@app.post(
    "/export/{export_type}/dialog",
    tags=["Export"],
    summary="Export a range as a copyable HTML dialog",
    response_class=HTMLResponse,
    responses={
        400: {"model": ExportErrorResponse, "description": "Invalid selection, range or file"},
        404: {"model": ExportErrorResponse, "description": "File or sheet not found"},
    },
)
async def export_range_dialog(export_type: ExportType, request: ExportRequest) -> HTMLResponse:
    """
    Export the selected range and render the clipboard dialog as HTML.

    Args:
        export_type: values, formulas or combined.
        request: Workbook path, optional sheet and optional A1 range.

    Returns:
        HTML page holding the JSON in a selectable text area.
    """
    dialog = run_export(request, export_type)
    return HTMLResponse(content=dialog.to_html())


def run_server(
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
) -> None:
    """
    Run the FastAPI server.

    Args:
        host: Host to bind to. Defaults to the configured api_host.
        port: Port to listen on. Defaults to the configured api_port.
        reload: Whether to enable auto-reload. Defaults to False.

    Example:
        from src.main import run_server
        run_server(host="127.0.0.1", port=8080)
    """
    app_settings = get_settings()
    configure_logging(app_settings.log_level)
    logger.info("Starting export API on %s:%s", host or app_settings.api_host, port or app_settings.api_port)

    uvicorn.run(
        "src.main:app",
        host=host or app_settings.api_host,
        port=port or app_settings.api_port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
