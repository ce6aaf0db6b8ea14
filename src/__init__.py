"""
Sheet JSON Export: copy spreadsheet selections out as JSON.

This package reads the selected cell range of a spreadsheet host and
serializes its values and/or formulas into a JSON document with metadata,
presented in a dialog for manual copying. The same three menu commands are
exposed through both OpenAPI (REST via FastAPI) and MCP (Model Context
Protocol) interfaces.

Architecture:
    - Host collaborator interface keeps the core independent of any host
    - openpyxl-backed host for workbook files and their saved selections
    - pydantic models for export documents and transport payloads
"""

__version__ = "0.1.0"
