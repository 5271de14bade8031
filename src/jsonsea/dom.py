"""
DOM - graph vocabulary for jsonsea

Every converted document is a tree of SeaNodes hanging off one synthetic
RootNode. Edges connect a parent to each child and carry the member key or
array index as their label.

Key invariant: every node except the root has exactly one parent, so the
graph is always a tree (JSON itself is a tree).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

ROOT_ID = "$"
VALUE_ID = "$/value"  # id of the single child of a root that wraps a non-container value

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def member_id(parent_id: str, key: str) -> str:
    """Path-derived id for an object member."""
    if _IDENTIFIER.match(key):
        return f"{parent_id}.{key}"
    return f"{parent_id}[{json.dumps(key, ensure_ascii=False)}]"


def element_id(parent_id: str, index: int) -> str:
    """Path-derived id for an array element."""
    return f"{parent_id}[{index}]"


@dataclass
class SeaNode:
    """A vertex in the converted JSON graph."""
    type: ClassVar[str] = "node"

    id: str
    key: str | None = None  # member name or stringified index; None for the root and a bare top-level value
    parent_id: str | None = None
    child_ids: list[str] = field(default_factory=list)
    depth: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_leaf(self) -> bool:
        return not self.child_ids


@dataclass
class RootNode(SeaNode):
    """Synthetic anchor. kind says what the top-level value is."""
    type: ClassVar[str] = "root"

    kind: str = "object"  # "object", "array" or "value"

    @property
    def wraps_value(self) -> bool:
        """True when the document is a bare scalar or wrapper, held by a single child."""
        return self.kind == "value"


@dataclass
class ObjectNode(SeaNode):
    type: ClassVar[str] = "object"

    collapsed: bool = False


@dataclass
class ArrayNode(SeaNode):
    type: ClassVar[str] = "array"

    collapsed: bool = False
    size: int = 0


@dataclass
class ScalarNode(SeaNode):
    """A string, number, boolean or null leaf. value_type keeps "5" and 5 apart."""
    type: ClassVar[str] = "scalar"

    value: Any = None
    value_type: str = "null"  # "string", "number", "boolean" or "null"


@dataclass
class MongoSpecialNode(SeaNode):
    """A recognized Extended JSON wrapper ({"$oid": ...}, {"$date": ...}) shown as one unit."""
    type: ClassVar[str] = "mongo"

    kind: str = ""
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def wrapped_value(self) -> Any:
        """The value under the wrapper's first key (e.g. the hex string of an $oid)."""
        return next(iter(self.raw.values()), None)


@dataclass(frozen=True)
class Edge:
    """A directional parent -> child edge."""
    source: str
    target: str
    label: str

    def __post_init__(self):
        if self.source == self.target:
            raise ValueError(f"Edge cannot loop on itself: {self.source!r}")

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"
