# Overview: Row -> JSON helpers shared by model to_dict() methods.

from __future__ import annotations

import json
from collections import defaultdict
from decimal import Decimal
from typing import Any


def load_json_list(raw: str | None) -> list:
    """JSON text column -> list. Missing or unparsable values read as []."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return value if isinstance(value, list) else []


def dump_json_list(value: Any) -> str:
    return json.dumps(value if isinstance(value, list) else [])


def group_by(items, key: str) -> dict[Any, list]:
    """Bucket rows by one attribute, keeping query order inside each bucket."""
    grouped: dict[Any, list] = defaultdict(list)
    for item in items:
        grouped[getattr(item, key)].append(item)
    return grouped


def as_float(value: Any, default: float | None = 0.0) -> float | None:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
