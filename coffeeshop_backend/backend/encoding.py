# backend/encoding.py

"""
CELL ENCODING HELPERS

Rows keep structured values (price maps, image lists, order items) as JSON
text in a single column. Reads must never throw on a bad cell: a value that
does not parse falls back to an empty structure of the expected shape.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder


def safe_json_parse(raw: Any, default: Any):
    """
    Parse a JSON text cell.

    Already-decoded values of the same shape as `default` are passed through
    (some clients send the structure, some send it stringified).
    """
    if isinstance(default, dict) and isinstance(raw, dict):
        return raw
    if isinstance(default, list) and isinstance(raw, list):
        return raw
    if not raw or not isinstance(raw, str):
        return _fresh(default)

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return _fresh(default)

    if default is not None and not isinstance(parsed, type(default)):
        return _fresh(default)
    return parsed


def _fresh(default):
    if isinstance(default, dict):
        return {}
    if isinstance(default, list):
        return []
    return default


def dump_json(value: Any) -> str:
    return json.dumps(value, cls=DjangoJSONEncoder, ensure_ascii=False)


def as_bool(value: Any) -> bool:
    """Text-stored flags: only a case-insensitive "true" counts."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def json_number(value: Decimal):
    """Decimal -> int when integral, float otherwise (keeps JSON cells numeric)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
