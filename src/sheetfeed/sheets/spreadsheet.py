"""Spreadsheet entity: worksheet discovery."""

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Optional, Union

from ..config import Settings
from ..feeds.auth import AuthProvider
from ..feeds.envelope import FeedEnvelope, parse_timestamp, text_of
from ..feeds.errors import ConfigError, NotFoundError
from ..feeds.loader import FeedKind, FeedLoader
from ..feeds.transport import Transport
from .mappers import entry_id_token
from .worksheet import Worksheet

logger = logging.getLogger(__name__)


class Spreadsheet:
    """A spreadsheet identified by its key.

    Metadata (author, title, updated, sheet_count, start_index) is filled in
    by every discovery call.
    """

    def __init__(
        self,
        key: str,
        auth: Optional[AuthProvider] = None,
        transport: Optional[Transport] = None,
        config: Optional[Settings] = None,
        loader: Optional[FeedLoader] = None,
    ):
        """
        Initialize the spreadsheet.

        Args:
            key: Spreadsheet key
            auth: Optional credential provider; private feeds are used when set
            transport: Optional transport (an httpx transport is created if not provided)
            config: Optional settings (module settings are used if not provided)
            loader: Optional pre-built FeedLoader, overrides auth/transport/config
        """
        if not key:
            raise ConfigError("A Spreadsheet must have a key.")
        self.key = key
        self.loader = loader or FeedLoader(transport=transport, auth=auth, config=config)

        self.author: Any = None
        self.title: Optional[str] = None
        self.updated: Optional[datetime] = None
        self.sheet_count: Optional[int] = None
        self.start_index: Optional[int] = None

    def __repr__(self) -> str:
        return f"Spreadsheet(key={self.key!r}, title={self.title!r})"

    @property
    def auth(self) -> Optional[AuthProvider]:
        return self.loader.auth

    async def discover_worksheets(self) -> list[Worksheet]:
        """Fetch the worksheet feed and return every worksheet in feed order."""
        envelope = await self._load()
        worksheets = [
            self._worksheet_from_entry(entry, position)
            for position, entry in enumerate(envelope.entries, start=1)
        ]
        logger.info(f"Found {len(worksheets)} worksheets in spreadsheet {self.key}")
        return worksheets

    async def iter_worksheets(self) -> AsyncIterator[Worksheet]:
        """Yield worksheets one at a time. Each iteration re-fetches the feed."""
        for worksheet in await self.discover_worksheets():
            yield worksheet

    async def get_worksheet(self, id_or_index: Union[int, str]) -> Worksheet:
        """
        Get one worksheet by 1-based position or by worksheet id.

        Raises:
            NotFoundError: If the index is out of range or no id matches
        """
        envelope = await self._load()

        if isinstance(id_or_index, int) and not isinstance(id_or_index, bool):
            if 1 <= id_or_index <= len(envelope.entries):
                return self._worksheet_from_entry(envelope.entries[id_or_index - 1], id_or_index)
        else:
            for position, entry in enumerate(envelope.entries, start=1):
                if self._worksheet_id(entry) == id_or_index:
                    return self._worksheet_from_entry(entry, position)

        raise NotFoundError(f"No worksheet {id_or_index!r} in spreadsheet {self.key}")

    async def aclose(self) -> None:
        await self.loader.aclose()

    async def __aenter__(self) -> "Spreadsheet":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _load(self) -> FeedEnvelope:
        document = await self.loader.fetch(FeedKind.WORKSHEETS, self.key)
        envelope = FeedEnvelope.from_document(document)

        self.author = envelope.author
        self.title = envelope.title
        self.updated = envelope.updated
        self.sheet_count = envelope.total_results
        self.start_index = envelope.start_index
        return envelope

    @staticmethod
    def _worksheet_id(entry: dict[str, Any]) -> str:
        return entry_id_token(text_of(entry.get("id")) or "")

    def _worksheet_from_entry(self, entry: dict[str, Any], index: int) -> Worksheet:
        return Worksheet(
            self,
            self._worksheet_id(entry),
            index=index,
            title=text_of(entry.get("title")),
            updated=parse_timestamp(entry.get("updated")),
        )
