"""JSON debug dump of collected activity.

Independent of the prompt formatter in ``perfdigest_core.report``; this is
for inspecting what was fetched, not for feeding the model.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from enum import Enum


def _default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_plain(value):
    """Convert dataclasses (recursively), mappings and sequences into JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if hasattr(value, "as_dict"):
        return {k: to_plain(v) for k, v in value.as_dict().items()}
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def dump_json(value, indent: int = 2) -> str:
    return json.dumps(to_plain(value), indent=indent, default=_default)
