import re
from typing import Optional

from .errors import InvalidInput

# ASCII digits with an optional sign, nothing else
_ID_RE = re.compile(r"[+-]?[0-9]+")


def validate_title(title: Optional[str]) -> str:
    """
    Return the title unchanged if it has any non-whitespace content.

    Raises InvalidInput otherwise (None included). Called before every
    create and update, so a rejected request never reaches the store.
    """
    if title is None or not title.strip():
        raise InvalidInput("Title is required")
    return title


def parse_todo_id(raw: str) -> int:
    """Parse an identifier taken from a path segment."""
    if not isinstance(raw, str) or not _ID_RE.fullmatch(raw):
        raise InvalidInput("Invalid ID")
    return int(raw)
