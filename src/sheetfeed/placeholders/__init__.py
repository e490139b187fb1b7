"""Cell token substitution for nested structures.

Leaves of the form ``R<row>C<col>`` are looked up on a worksheet and
replaced with the resulting cells.
"""

from .syntax import (
    CELL_TOKEN_PATTERN,
    is_cell_token,
    collect_cell_tokens,
    substitute_tokens,
)
from .resolver import CellTemplateResolver

__all__ = [
    "CELL_TOKEN_PATTERN",
    "is_cell_token",
    "collect_cell_tokens",
    "substitute_tokens",
    "CellTemplateResolver",
]
