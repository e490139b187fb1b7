"""Spreadsheet, worksheet and entry models."""

from .models import Row, Cell, Meta
from .mappers import cell_value, row_from_entry, cell_from_entry, meta_from_entry
from .spreadsheet import Spreadsheet
from .worksheet import Worksheet

__all__ = [
    "Row",
    "Cell",
    "Meta",
    "cell_value",
    "row_from_entry",
    "cell_from_entry",
    "meta_from_entry",
    "Spreadsheet",
    "Worksheet",
]
