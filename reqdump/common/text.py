"""Display text of the values written into a request dump."""

from enum import Enum
from typing import Any


def to_display_text(value: Any) -> str:
    """Render a value the way it appears in a dump line."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(to_display_text(item) for item in value) + ']'
    return str(value)
