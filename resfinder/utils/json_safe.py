from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping


def to_jsonable(obj: Any) -> Any:
    """
    Convert common Python objects to JSON-serializable equivalents.

    - objects with a to_dict() method use it
    - enums serialize as their value
    - sets are emitted sorted so output is stable

    """
    if obj is None or isinstance(obj, (str, bool)):
        return obj

    # IntEnum is an int; check enums first.
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)

    if isinstance(obj, (int, float)):
        return obj

    if isinstance(obj, Path):
        return str(obj)

    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_jsonable(to_dict())

    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))

    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}

    if isinstance(obj, (set, frozenset)):
        return sorted(to_jsonable(x) for x in obj)

    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x) for x in obj]

    # fallback: string representation
    return str(obj)
