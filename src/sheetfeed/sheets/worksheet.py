"""Worksheet entity: row, cell and template operations."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..feeds.envelope import FeedEnvelope
from ..feeds.errors import ConfigError, EmptyResultError, NotFoundError, RemoteFeedError
from ..feeds.loader import FeedKind
from .mappers import cell_from_entry, entry_id_token, meta_from_entry, row_from_entry
from .models import Cell, Meta, Row

if TYPE_CHECKING:
    from .spreadsheet import Spreadsheet

logger = logging.getLogger(__name__)


class Worksheet:
    """A single worksheet of a spreadsheet.

    Rows and cells are fetched on every call; nothing is cached.
    """

    def __init__(
        self,
        spreadsheet: "Spreadsheet",
        id: str,
        index: Optional[int] = None,
        title: Optional[str] = None,
        updated: Optional[datetime] = None,
    ):
        if spreadsheet is None:
            raise ConfigError("A Worksheet must belong to a Spreadsheet.")
        if not id:
            raise ConfigError("A Worksheet must have an id.")
        self.spreadsheet = spreadsheet
        self.id = id
        self.index = index
        self.title = title
        self.updated = updated

    def __repr__(self) -> str:
        return f"Worksheet(id={self.id!r}, index={self.index}, title={self.title!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Worksheet):
            return NotImplemented
        return (
            self.spreadsheet.key == other.spreadsheet.key
            and self.id == other.id
            and self.index == other.index
            and self.title == other.title
            and self.updated == other.updated
        )

    def __hash__(self) -> int:
        return hash((self.spreadsheet.key, self.id))

    async def each_row(self) -> list[tuple[Row, Meta]]:
        """Fetch every row of the list feed.

        Raises:
            EmptyResultError: If the worksheet has no rows
        """
        envelope = await self._load_feed(FeedKind.LIST)
        if not envelope.entries:
            raise EmptyResultError(f"No rows found in worksheet {self.id}.")
        return [
            (row_from_entry(entry), meta_from_entry(entry, envelope, offset))
            for offset, entry in enumerate(envelope.entries)
        ]

    async def get_row(self, entry_id: str) -> tuple[Row, Meta]:
        """Fetch a single row by its entry id (``Meta.id`` from ``each_row``)."""
        entry = await self._load_entry(FeedKind.LIST, entry_id)
        return row_from_entry(entry), meta_from_entry(entry)

    async def each_cell(self) -> list[tuple[Cell, Meta]]:
        """Fetch every non-empty cell of the cells feed."""
        envelope = await self._load_feed(FeedKind.CELLS)
        return [
            (cell_from_entry(entry), meta_from_entry(entry, envelope, offset))
            for offset, entry in enumerate(envelope.entries)
        ]

    async def get_cell(self, entry_id: str) -> tuple[Cell, Meta]:
        """Fetch a single cell by its entry id, e.g. ``R1C5``."""
        entry = await self._load_entry(FeedKind.CELLS, entry_id)
        return cell_from_entry(entry), meta_from_entry(entry)

    async def map_cells(
        self,
        structure: Any,
        modifier: Optional[Callable[[Cell], Any]] = None,
    ) -> Any:
        """
        Replace ``R<row>C<col>`` tokens in a nested structure with cells.

        Args:
            structure: Any mix of dicts, lists and tuples
            modifier: Optional function applied to each Cell; its result is
                used as the replacement instead of the Cell itself

        Returns:
            A copy of the structure with every token replaced
        """
        from ..placeholders import CellTemplateResolver

        return await CellTemplateResolver(self).resolve(structure, modifier)

    async def _load_feed(self, kind: FeedKind) -> FeedEnvelope:
        document = await self.spreadsheet.loader.fetch(kind, self.spreadsheet.key, self.id)
        return FeedEnvelope.from_document(document)

    async def _load_entry(self, kind: FeedKind, entry_id: str) -> dict[str, Any]:
        noun = "row" if kind == FeedKind.LIST else "cell"
        if not entry_id:
            raise NotFoundError(f"No {noun} found with id: {entry_id!r}")

        try:
            entry = await self.spreadsheet.loader.fetch(
                kind, self.spreadsheet.key, self.id, entry_id_token(entry_id)
            )
        except RemoteFeedError as e:
            if e.status_code == 404:
                raise NotFoundError(f"No {noun} found with id: {entry_id}") from e
            raise

        if not entry or "id" not in entry:
            raise NotFoundError(f"No {noun} found with id: {entry_id}")
        return entry
