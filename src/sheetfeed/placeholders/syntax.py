"""Cell token syntax and structure walking."""

import re
from typing import Any, Mapping, Pattern

# R<row>C<col>, e.g. R1C5 is row 1, column 5
CELL_TOKEN_PATTERN: Pattern = re.compile(r"R\d+C\d+")


def is_cell_token(value: Any) -> bool:
    """Check whether a leaf value is a cell token."""
    return isinstance(value, str) and CELL_TOKEN_PATTERN.fullmatch(value) is not None


def collect_cell_tokens(structure: Any) -> list[str]:
    """
    Collect the distinct cell tokens among the leaves of a structure.

    Dict values, list items and tuple items are walked recursively; dict
    keys are not. Tokens are returned in first-seen order.
    """
    seen: dict[str, None] = {}

    def walk(node: Any) -> None:
        if isinstance(node, dict):
            for value in node.values():
                walk(value)
        elif isinstance(node, (list, tuple)):
            for item in node:
                walk(item)
        elif is_cell_token(node):
            seen.setdefault(node, None)

    walk(structure)
    return list(seen)


def substitute_tokens(structure: Any, replacements: Mapping[str, Any]) -> Any:
    """
    Return a rebuilt structure with token leaves replaced.

    Containers are never mutated, so a sub-structure referenced twice is
    substituted once per occurrence and replacement values are not walked.
    """
    if isinstance(structure, dict):
        return {key: substitute_tokens(value, replacements) for key, value in structure.items()}
    if isinstance(structure, list):
        return [substitute_tokens(item, replacements) for item in structure]
    if isinstance(structure, tuple):
        return tuple(substitute_tokens(item, replacements) for item in structure)
    if isinstance(structure, str) and structure in replacements:
        return replacements[structure]
    return structure
