"""
Conversion engine for jsonsea.

Implements:
- convert_json_tree: decoded JSON value -> JsonTree (nodes, keyed store, edges)
- Depth-first pre-order traversal driven by an explicit work stack
- Path-derived node ids, stable across repeated conversions
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .classify import ARRAY, MONGO_SPECIAL, NULL, OBJECT, classify, scalar_type
from .dom import (
    ROOT_ID,
    VALUE_ID,
    ArrayNode,
    Edge,
    MongoSpecialNode,
    ObjectNode,
    RootNode,
    ScalarNode,
    SeaNode,
    element_id,
    member_id,
)
from .entities import Entities
from .errors import UnsupportedValueKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserOptions:
    """Conversion switches. Both default off."""
    is_mongo_data: bool = False
    skip_root_edges: bool = False


def _node_key(node: SeaNode) -> str:
    return node.id


@dataclass
class JsonTree:
    """Aggregate result of one conversion."""
    sea_nodes: list[SeaNode] = field(default_factory=list)
    sea_node_entities: Entities[SeaNode] = field(default_factory=lambda: Entities(_node_key))
    edges: list[Edge] = field(default_factory=list)

    @property
    def root(self) -> RootNode:
        root = self.sea_nodes[0] if self.sea_nodes else None
        if not isinstance(root, RootNode):
            raise ValueError("Tree has no root node")
        return root

    def node(self, node_id: str) -> SeaNode:
        """Look up a node by id. Raises KeyError if absent."""
        return self.sea_node_entities[node_id]

    def children(self, node_id: str) -> list[SeaNode]:
        """Direct children in document order."""
        return [self.sea_node_entities[child_id] for child_id in self.node(node_id).child_ids]

    def depth_first(self, start: str = ROOT_ID) -> Iterator[SeaNode]:
        """Traverse pre-order from start, yielding a node before its children."""
        stack = [start]
        while stack:
            node = self.sea_node_entities[stack.pop()]
            yield node
            stack.extend(reversed(node.child_ids))

    def edge_labels(self) -> list[str]:
        return [edge.label for edge in self.edges]


# Pending work item: (parent, key, node id, value)
_Pending = tuple[SeaNode, str | None, str, Any]


def _pending_children(node: SeaNode, value: Any) -> list[_Pending]:
    """Work items for the members of a container value, in document order."""
    if isinstance(value, dict):
        items: list[_Pending] = []
        for key, child in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueKind(key)
            items.append((node, key, member_id(node.id, key), child))
        return items
    return [
        (node, str(index), element_id(node.id, index), child)
        for index, child in enumerate(value)
    ]


def _make_node(parent: SeaNode, key: str | None, node_id: str, value: Any, mongo: bool) -> SeaNode:
    """Build the node for one value. Classification happens exactly once here."""
    c = classify(value, mongo)
    common = {"id": node_id, "key": key, "parent_id": parent.id, "depth": parent.depth + 1}

    if c.tag == OBJECT:
        return ObjectNode(**common)
    if c.tag == ARRAY:
        return ArrayNode(size=len(value), **common)
    if c.tag == MONGO_SPECIAL:
        return MongoSpecialNode(kind=c.kind or "", raw=copy.deepcopy(value), **common)
    if c.tag == NULL:
        return ScalarNode(value=None, value_type="null", **common)
    return ScalarNode(value=value, value_type=scalar_type(value), **common)


def convert_json_tree(value: Any, options: ParserOptions | None = None) -> JsonTree:
    """
    Convert a decoded JSON value into a JsonTree.

    The root node stands for the top-level value: when that value is an object
    or array, its members become the root's children. A bare scalar (or a
    top-level Mongo wrapper) becomes the single child of a "value" root.

    Every non-root node gets one edge from its parent, labelled with its key or
    index, except root -> child edges when options.skip_root_edges is set.

    The input is never mutated. Raises UnsupportedValueKind for values a JSON
    parser cannot produce; nothing is returned in that case.
    """
    options = options or ParserOptions()
    mongo = options.is_mongo_data

    tree = JsonTree()

    top = classify(value, mongo)
    if top.tag == OBJECT:
        root = RootNode(id=ROOT_ID, kind="object")
        stack = _pending_children(root, value)
    elif top.tag == ARRAY:
        root = RootNode(id=ROOT_ID, kind="array")
        stack = _pending_children(root, value)
    else:
        root = RootNode(id=ROOT_ID, kind="value")
        stack = [(root, None, VALUE_ID, value)]

    tree.sea_nodes.append(root)
    tree.sea_node_entities.add(root)

    skipped = 0
    stack.reverse()
    while stack:
        parent, key, node_id, child_value = stack.pop()
        node = _make_node(parent, key, node_id, child_value, mongo)

        tree.sea_nodes.append(node)
        tree.sea_node_entities.add(node)
        parent.child_ids.append(node.id)

        if parent is root and options.skip_root_edges:
            skipped += 1
        else:
            tree.edges.append(Edge(source=parent.id, target=node.id, label=key if key is not None else ""))

        if isinstance(node, (ObjectNode, ArrayNode)):
            stack.extend(reversed(_pending_children(node, child_value)))

    logger.debug(
        "Converted JSON into %d nodes, %d edges (%d root edges skipped)",
        len(tree.sea_nodes), len(tree.edges), skipped,
    )
    return tree
