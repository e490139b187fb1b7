"""Resolve cell tokens in a nested structure against a worksheet."""

import asyncio
import copy
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..sheets.models import Cell
from .syntax import collect_cell_tokens, substitute_tokens

if TYPE_CHECKING:
    from ..sheets.worksheet import Worksheet

logger = logging.getLogger(__name__)


class CellTemplateResolver:
    """Replace ``R<row>C<col>`` leaves with the cells they address."""

    def __init__(self, worksheet: "Worksheet"):
        self.worksheet = worksheet

    async def resolve(
        self,
        structure: Any,
        modifier: Optional[Callable[[Cell], Any]] = None,
    ) -> Any:
        """
        Resolve every token in the structure.

        Each distinct token is fetched once and all fetches run concurrently.
        The first failing fetch cancels the others and its error propagates;
        cancelling this coroutine cancels every outstanding fetch.

        Args:
            structure: Nested dicts/lists/tuples with token leaves
            modifier: Optional function mapping a Cell to its replacement

        Returns:
            A deep copy of the structure with tokens replaced
        """
        result = copy.deepcopy(structure)
        tokens = collect_cell_tokens(structure)

        if not tokens:
            logger.debug("No cell tokens found, returning unchanged copy")
            return result

        logger.info(
            f"Resolving {len(tokens)} cell tokens on worksheet {self.worksheet.id}"
        )
        try:
            cells = await self._fetch_all(tokens)
        except Exception as e:
            logger.error(f"Error resolving cell tokens on worksheet {self.worksheet.id}: {e}")
            raise

        replacements = {
            token: modifier(cell) if modifier is not None else cell
            for token, cell in cells.items()
        }
        return substitute_tokens(result, replacements)

    async def _fetch_all(self, tokens: list[str]) -> dict[str, Cell]:
        tasks = {token: asyncio.ensure_future(self._fetch(token)) for token in tokens}
        try:
            await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
            raise
        return {token: task.result() for token, task in tasks.items()}

    async def _fetch(self, token: str) -> Cell:
        cell, _meta = await self.worksheet.get_cell(token)
        return cell
