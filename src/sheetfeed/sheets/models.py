"""Data models for feed entities."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Row(BaseModel):
    """A list-feed row: column name to cell value."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, Any] = Field(default_factory=dict)

    def __getitem__(self, column: str) -> Any:
        return self.values[column]

    def __contains__(self, column: object) -> bool:
        return column in self.values

    def __len__(self) -> int:
        return len(self.values)

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)

    def keys(self):
        return self.values.keys()

    def as_dict(self) -> dict[str, Any]:
        return dict(self.values)


class Cell(BaseModel):
    """A cells-feed cell. Row and column are 1-based."""

    model_config = ConfigDict(frozen=True)

    row: int
    col: int
    value: Any = None

    @property
    def token(self) -> str:
        """The ``R<row>C<col>`` placeholder addressing this cell."""
        return f"R{self.row}C{self.col}"


class Meta(BaseModel):
    """Per-entry metadata.

    ``id`` is the raw entry identifier and can be passed back to
    ``get_row``/``get_cell``. ``index`` and ``total`` are only set when the
    entry came from a full enumeration.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    updated: Optional[datetime] = None
    index: Optional[int] = None
    total: Optional[int] = None
