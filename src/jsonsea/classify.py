"""
Value classifier.

Pure predicates over decoded JSON values. classify() returns exactly one
Classification per value and is evaluated once per node by the engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .errors import UnsupportedValueKind

NULL = "null"
ARRAY = "array"
OBJECT = "object"
MONGO_SPECIAL = "mongoSpecial"
SCALAR = "scalar"

# Extended JSON wrapper shapes, keyed by their exact key set
MONGO_WRAPPERS: dict[frozenset[str], str] = {
    frozenset({"$oid"}): "objectId",
    frozenset({"$date"}): "date",
    frozenset({"$numberLong"}): "numberLong",
    frozenset({"$numberInt"}): "numberInt",
    frozenset({"$numberDouble"}): "numberDouble",
    frozenset({"$numberDecimal"}): "numberDecimal",
    frozenset({"$uuid"}): "uuid",
    frozenset({"$symbol"}): "symbol",
    frozenset({"$timestamp"}): "timestamp",
    frozenset({"$minKey"}): "minKey",
    frozenset({"$maxKey"}): "maxKey",
    frozenset({"$code"}): "code",
    frozenset({"$code", "$scope"}): "codeWithScope",
    frozenset({"$binary", "$type"}): "binary",
    frozenset({"$regex", "$options"}): "regex",
}


@dataclass(frozen=True)
class Classification:
    """Tagged result of classify(). kind is only set for mongoSpecial."""
    tag: str
    kind: str | None = None


def is_null(value: Any) -> bool:
    return value is None


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, bool, int, float))


def mongo_wrapper_kind(value: Any) -> str | None:
    """Return the wrapper kind if value is a recognized Extended JSON wrapper."""
    if not isinstance(value, dict) or not value:
        return None
    return MONGO_WRAPPERS.get(frozenset(value))


def scalar_type(value: Any) -> str:
    """JSON type tag of a leaf value. bool is tested before numbers since bool subclasses int."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "number"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueKind(value)  # NaN and Infinity have no JSON form
        return "number"
    if isinstance(value, str):
        return "string"
    raise UnsupportedValueKind(value)


def classify(value: Any, mongo: bool = False) -> Classification:
    """
    Classify a decoded JSON value.

    Priority: null, array, mongo wrapper (only with mongo=True), object, scalar.
    Raises UnsupportedValueKind for anything a JSON parser cannot produce.
    """
    if is_null(value):
        return Classification(NULL)
    if is_array(value):
        return Classification(ARRAY)
    if is_object(value):
        if mongo:
            kind = mongo_wrapper_kind(value)
            if kind is not None:
                return Classification(MONGO_SPECIAL, kind)
        return Classification(OBJECT)
    if is_scalar(value):
        return Classification(SCALAR)
    raise UnsupportedValueKind(value)
