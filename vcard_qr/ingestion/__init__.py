"""Reading contact lists and exporting processed contacts."""
from __future__ import annotations

from .exporters import GridLayout, export_workbook
from .loaders import load_contacts

__all__ = ["GridLayout", "export_workbook", "load_contacts"]
