"""
JSON text helpers: strict parsing, validity check, pretty formatting.

Parsing keeps object key order (dicts preserve insertion order) and rejects
the NaN/Infinity literals the stdlib decoder would otherwise accept.
"""

from __future__ import annotations

import json
import math
from typing import Any

from .errors import JsonParseError, UnsupportedValueKind

DEFAULT_STRINGIFIED_JSON = """{
  "name": "json sea",
  "version": 1,
  "description": "Import JSON, explore it as a graph, edit it and export it again.",
  "published": true,
  "license": null,
  "keywords": ["json", "graph", "editor"],
  "author": {
    "name": "jsonsea",
    "links": [
      {"type": "docs", "url": "https://example.com/docs"},
      {"type": "issues", "url": "https://example.com/issues"}
    ]
  },
  "stats": {"nodes": 17, "ratio": 0.5, "empty": {}, "none": []}
}"""


def _reject_constant(name: str) -> Any:
    raise JsonParseError(f"Invalid JSON literal: {name}")


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise JsonParseError(f"Number out of range: {text}")
    return number


def parse(text: str) -> Any:
    """Parse JSON text. Raises JsonParseError with line/column on failure."""
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as e:
        raise JsonParseError(e.msg, line=e.lineno, column=e.colno) from e
    except RecursionError as e:
        raise JsonParseError("Document nested too deeply") from e


def is_valid_json(text: str) -> bool:
    """True if text parses as strict JSON."""
    try:
        parse(text)
    except JsonParseError:
        return False
    return True


def format_json_like_data(data: Any, indent: int | None = 2) -> str:
    """Pretty-print a decoded value as JSON text (two-space indent by default)."""
    try:
        return json.dumps(data, indent=indent, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise UnsupportedValueKind(data) from e
    except RecursionError as e:
        raise UnsupportedValueKind(data, "document nested too deeply") from e
