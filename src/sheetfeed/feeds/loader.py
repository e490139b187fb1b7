"""Fetch feed documents with authentication and 401 retry."""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from ..config import Settings, settings as default_settings
from .auth import AuthProvider
from .errors import AuthError, RemoteFeedError, TransportError
from .parser import parse_feed_xml
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class FeedKind(str, Enum):
    """Kind of feed, used as the first path segment after the base URL."""

    WORKSHEETS = "worksheets"
    LIST = "list"  # One entry per row, fields keyed by column header
    CELLS = "cells"  # One entry per non-empty cell


class FeedLoader:
    """Builds feed URLs and fetches them as parsed documents.

    The loader holds no per-call state; one instance can serve any number
    of concurrent fetches.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        auth: Optional[AuthProvider] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.transport = transport or HttpxTransport(timeout=self.config.request_timeout_seconds)
        self.auth = auth

    @property
    def visibility(self) -> str:
        return "private" if self.auth is not None else "public"

    def build_url(
        self,
        kind: FeedKind,
        spreadsheet_key: str,
        worksheet_id: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> str:
        """Build the feed URL, optionally scoped to a worksheet and a single entry."""
        segments = [self.config.feed_base_url.rstrip("/"), FeedKind(kind).value, spreadsheet_key]
        if worksheet_id:
            segments.append(worksheet_id)
        segments.extend([self.visibility, "values"])
        if entry_id:
            segments.append(entry_id)
        return "/".join(segments) + f"?hl={self.config.feed_locale}"

    async def fetch(
        self,
        kind: FeedKind,
        spreadsheet_key: str,
        worksheet_id: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Fetch and parse a feed.

        Args:
            kind: Feed kind
            spreadsheet_key: Key of the spreadsheet
            worksheet_id: Worksheet id, required for list and cells feeds
            entry_id: Optional single entry to fetch instead of the whole feed

        Returns:
            The parsed document (see ``parse_feed_xml``)

        Raises:
            TransportError: If the request failed or timed out
            AuthError: If every attempt was answered with 401
            RemoteFeedError: For any other non-200 status
            ParseError: If the body is not valid XML
        """
        url = self.build_url(kind, spreadsheet_key, worksheet_id, entry_id)
        headers: dict[str, str] = {}
        if self.auth is not None:
            headers["Authorization"] = await self.auth.get_auth_header(False)

        logger.info(f"Fetching {FeedKind(kind).value} feed for spreadsheet {spreadsheet_key}")
        logger.debug(f"Feed URL: {url}")

        attempt = 1
        while True:
            status_code, body = await self._request(url, headers)

            if status_code == 401 and self.auth is not None:
                if attempt >= self.config.max_auth_attempts:
                    raise AuthError(url, attempt)
                delay = self.config.auth_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    f"Unauthorized on attempt {attempt}/{self.config.max_auth_attempts}, "
                    f"refreshing credentials in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
                headers["Authorization"] = await self.auth.get_auth_header(True)
                attempt += 1
                continue

            if status_code == 200:
                return parse_feed_xml(body)

            logger.debug(f"Feed request failed with status {status_code}")
            raise RemoteFeedError(body, status_code)

    async def _request(self, url: str, headers: dict[str, str]) -> tuple[int, str]:
        try:
            return await asyncio.wait_for(
                self.transport.request(url, "GET", dict(headers)),
                timeout=self.config.request_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"GET {url} timed out after {self.config.request_timeout_seconds}s"
            ) from e

    async def aclose(self) -> None:
        await self.transport.aclose()
