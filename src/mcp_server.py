"""
MCP (Model Context Protocol) server for range exports.

This module exposes the export menu as MCP tools that AI agents can call.
Each menu item becomes one tool; calling it opens the named workbook as a
host and runs the matching export trigger, returning the JSON the host
dialog would have shown.

MCP Tools:
    - export_values: Export the selected range's values as JSON
    - export_formulas: Export the selected range's formulas as JSON
    - export_both: Export values and formulas together
    - get_menu: Describe the export menu

Example:
    To run the MCP server:
        python -m src.mcp_server

    Or programmatically:
        from src.mcp_server import run_mcp_server
        run_mcp_server()
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    TextContent,
    Tool,
)

from src.adapters.openpyxl_adapter import OpenpyxlHost
from src.config import Settings, configure_logging, get_settings
from src.exceptions.export_exceptions import ExportServiceError
from src.services.export_service import ACTION_EXPORT_TYPES, ExportService, build_menu

logger = logging.getLogger(__name__)

TOOL_DESCRIPTIONS = {
    "export_values": (
        "Export the values of a selected range in an Excel workbook as JSON. "
        "Uses the selection saved in the workbook unless cell_range is given."
    ),
    "export_formulas": (
        "Export the formulas of a selected range in an Excel workbook as JSON. "
        "Cells holding literal values export as empty strings."
    ),
    "export_both": (
        "Export both the values and the formulas of a selected range in an "
        "Excel workbook as one JSON document."
    ),
}

SELECTION_SCHEMA = {
    "type": "object",
    "properties": {
        "file_path": {
            "type": "string",
            "description": "Path to the Excel workbook (.xlsx or .xlsm)",
        },
        "sheet_name": {
            "type": "string",
            "description": "Name of the sheet (optional, defaults to the active sheet)",
        },
        "cell_range": {
            "type": "string",
            "description": (
                "Range in A1 notation, e.g. 'B2:C3' or 'Sheet1!B2:C3' "
                "(optional, defaults to the saved selection)"
            ),
        },
    },
    "required": ["file_path"],
}


class MCPExportServer:
    """
    MCP server implementation for range exports.

    The tool list is derived from the export menu, so MCP clients see the
    same three commands a spreadsheet user does.

    Attributes:
        settings: Application settings.
        server: The MCP Server instance.

    Example:
        mcp_server = MCPExportServer()
        await mcp_server.run()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.menu = build_menu(self.settings)
        self.server = Server("sheet-json-export")
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Set up MCP request handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return the list of available export tools."""
            return self._get_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Execute a tool and return the result."""
            result = await self._execute_tool(name, arguments)
            return [TextContent(type="text", text=json.dumps(result, default=str, indent=2))]

    def _get_tools(self) -> list[Tool]:
        """
        Get the list of available export tools.

        Returns:
            List of MCP Tool definitions, one per menu item plus get_menu.
        """
        tools = [
            Tool(
                name=item.action,
                description=TOOL_DESCRIPTIONS.get(item.action, item.label),
                inputSchema=SELECTION_SCHEMA,
            )
            for item in self.menu.items
        ]
        tools.append(
            Tool(
                name="get_menu",
                description="Describe the export menu: its title and the actions it offers.",
                inputSchema={
                    "type": "object",
                    "properties": {},
                    "required": [],
                },
            )
        )
        return tools

    async def _execute_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a tool by name with the given arguments.

        Args:
            name: The name of the tool to execute.
            arguments: The arguments to pass to the tool.

        Returns:
            Dictionary containing the tool execution result.
        """
        try:
            if name == "get_menu":
                return {"success": True, "data": self.menu.model_dump()}

            if name not in ACTION_EXPORT_TYPES:
                return {
                    "success": False,
                    "error": {
                        "error_code": "UNKNOWN_TOOL",
                        "message": f"Unknown tool: {name}",
                    },
                }

            if "file_path" not in arguments:
                return {
                    "success": False,
                    "error": {
                        "error_code": "MISSING_ARGUMENT",
                        "message": "Missing required argument: file_path",
                    },
                }

            host = OpenpyxlHost(
                file_path=arguments["file_path"],
                sheet_name=arguments.get("sheet_name"),
                selection=arguments.get("cell_range"),
            )
            service = ExportService(host, settings=self.settings)
            service.on_open()

            dialog = service.run_action(name)
            if dialog is None:
                return {
                    "success": False,
                    "error": {
                        "error_code": "INVALID_SELECTION",
                        "message": host.alerts[-1].message,
                    },
                }

            return {
                "success": True,
                "data": {
                    "title": dialog.title,
                    "label": dialog.label,
                    "json_text": dialog.body,
                    "document": json.loads(dialog.body),
                },
            }

        except ExportServiceError as e:
            return {
                "success": False,
                "error": e.to_dict(),
            }

    async def run(self) -> None:
        """
        Run the MCP server using stdio transport.

        This method starts the server and blocks until it is terminated.
        It uses stdin/stdout for communication with the MCP client.
        """
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def run_mcp_server() -> None:
    """
    Run the MCP export server.

    This is the entry point for running the MCP server from the command line.

    Example:
        python -m src.mcp_server
    """
    configure_logging()
    logger.info("Starting export MCP server")
    server = MCPExportServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    run_mcp_server()
