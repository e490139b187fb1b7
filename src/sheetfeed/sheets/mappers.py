"""Map single feed entries to Row, Cell and Meta values."""

from typing import Any, Optional

from ..feeds.envelope import FeedEnvelope, parse_timestamp, text_of
from ..feeds.errors import ParseError
from ..feeds.parser import ATTRIBUTES_KEY, TEXT_KEY
from .models import Cell, Meta, Row

ROW_FIELD_PREFIX = "gsx:"
CELL_ELEMENT = "gs:cell"


def cell_value(value: Any) -> Any:
    """Return None for an empty field, otherwise the raw parsed value."""
    if value is None:
        return None
    if isinstance(value, (str, list, dict)):
        return value if len(value) > 0 else None
    return value


def row_from_entry(entry: dict[str, Any]) -> Row:
    return Row(
        values={
            name[len(ROW_FIELD_PREFIX):]: cell_value(value)
            for name, value in entry.items()
            if name.startswith(ROW_FIELD_PREFIX)
        }
    )


def cell_from_entry(entry: dict[str, Any]) -> Cell:
    node = entry.get(CELL_ELEMENT)
    if not isinstance(node, dict) or ATTRIBUTES_KEY not in node:
        raise ParseError(f"Entry has no {CELL_ELEMENT} element with row/col attributes")

    attributes = node[ATTRIBUTES_KEY]
    try:
        row = int(attributes["row"])
        col = int(attributes["col"])
    except (KeyError, ValueError) as e:
        raise ParseError(f"Invalid {CELL_ELEMENT} coordinates: {attributes}") from e

    return Cell(row=row, col=col, value=cell_value(node.get(TEXT_KEY)))


def meta_from_entry(
    entry: dict[str, Any],
    envelope: Optional[FeedEnvelope] = None,
    offset: int = 0,
) -> Meta:
    if envelope is None:
        index, total = None, None
    else:
        index, total = envelope.start_index + offset, envelope.total_results

    return Meta(
        id=text_of(entry.get("id")) or "",
        updated=parse_timestamp(entry.get("updated")),
        index=index,
        total=total,
    )


def entry_id_token(entry_id: str) -> str:
    """Return the trailing path segment of an entry identifier URL."""
    return entry_id.rstrip("/").rsplit("/", 1)[-1]
