"""
Host adapters for range exports.

Implements the host collaborator interface for concrete hosts:
- OpenpyxlHost: workbook files (.xlsx, .xlsm) read with openpyxl
"""

from src.adapters.host import HostCollaborator, RangeHandle
from src.adapters.openpyxl_adapter import OpenpyxlHost, WorkbookRange

__all__ = [
    "HostCollaborator",
    "RangeHandle",
    "OpenpyxlHost",
    "WorkbookRange",
]
