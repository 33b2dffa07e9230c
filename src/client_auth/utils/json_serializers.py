"""JSON serialization for structured log fields."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Enum):
        return True, obj.value
    if isinstance(obj, Path):
        return True, str(obj)
    if isinstance(obj, (set, frozenset)):
        return True, sorted(str(item) for item in obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return True, asdict(obj)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    Fallback for json.dumps(default=...).

    - datetime/date -> ISO 8601 string
    - Enum -> value
    - Path -> string
    - set/frozenset -> sorted list of strings
    - dataclass instance -> dict
    - Everything else -> string
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    return str(obj)


__all__ = ["json_serializer"]
