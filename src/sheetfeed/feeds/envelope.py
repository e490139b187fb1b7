"""Normalize a parsed feed document into a typed envelope.

Every assumption about the feed shape lives here: ``entry`` may be absent,
a single mapping or a list, OpenSearch counters arrive as text, and Atom
text constructs such as ``<title type="text">`` carry their text under
``"#"``.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from .parser import TEXT_KEY


def as_list(value: Any) -> list:
    """Normalize an absent, single or repeated child into a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> Optional[str]:
    """Return the text content of a document node."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get(TEXT_KEY)
    return str(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an Atom timestamp (``2010-06-15T12:34:56.789Z``)."""
    text = text_of(value)
    if not text:
        return None
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _to_int(value: Any, default: int) -> int:
    text = text_of(value)
    try:
        return int(text) if text is not None else default
    except ValueError:
        return default


class FeedEnvelope(BaseModel):
    """Feed-level data plus the normalized list of entries."""

    entries: list[dict[str, Any]] = Field(default_factory=list)
    start_index: int = 1
    total_results: int = 0
    title: Optional[str] = None
    author: Any = None
    updated: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "FeedEnvelope":
        entries = [entry for entry in as_list(document.get("entry")) if isinstance(entry, dict)]
        return cls(
            entries=entries,
            start_index=_to_int(document.get("openSearch:startIndex"), 1),
            total_results=_to_int(document.get("openSearch:totalResults"), len(entries)),
            title=text_of(document.get("title")),
            author=document.get("author"),
            updated=parse_timestamp(document.get("updated")),
        )
