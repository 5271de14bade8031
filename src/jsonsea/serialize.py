"""
Serialization inverse: JsonTree -> JSON value -> JSON text.

Containers are rebuilt in a single pre-order pass: a parent's container
exists before any of its children is attached, and children arrive in
document order, so key order and element order survive the round trip.

Node edits (value, key, removal) produce a fresh JSON value; the caller
re-parses it into a new tree instead of patching the old one.
"""

from __future__ import annotations

import copy
from typing import Any

from .dom import ROOT_ID, ArrayNode, MongoSpecialNode, ObjectNode, RootNode, ScalarNode, SeaNode
from .engine import JsonTree
from .errors import UnsupportedValueKind
from .jsonutil import format_json_like_data


def _own_value(node: SeaNode) -> Any:
    """Value of a node before its children are attached."""
    if isinstance(node, RootNode):
        return [] if node.kind == "array" else {}
    if isinstance(node, ObjectNode):
        return {}
    if isinstance(node, ArrayNode):
        return []
    if isinstance(node, ScalarNode):
        return node.value
    if isinstance(node, MongoSpecialNode):
        return copy.deepcopy(node.raw)
    raise UnsupportedValueKind(node)


def to_value(tree: JsonTree, start: str = ROOT_ID) -> Any:
    """Rebuild the decoded JSON value rooted at start (the whole document by default)."""
    start_node = tree.node(start)
    if isinstance(start_node, RootNode) and start_node.wraps_value:
        if not start_node.child_ids:
            return None
        return to_value(tree, start_node.child_ids[0])

    built: dict[str, Any] = {}
    for node in tree.depth_first(start):
        value = _own_value(node)
        built[node.id] = value
        if node.id == start:
            continue
        container = built[node.parent_id]
        if isinstance(container, list):
            container.append(value)
        else:
            container[node.key] = value
    return built[start]


def serialize(tree: JsonTree, indent: int | None = 2) -> str:
    """JSON text for the whole tree."""
    return format_json_like_data(to_value(tree), indent=indent)


def node_path(tree: JsonTree, node_id: str) -> list[str | int]:
    """Keys and indexes leading from the document root to node_id."""
    path: list[str | int] = []
    node = tree.node(node_id)
    while node.parent_id is not None:
        parent = tree.node(node.parent_id)
        if isinstance(parent, RootNode) and parent.wraps_value:
            break
        is_element = isinstance(parent, ArrayNode) or (isinstance(parent, RootNode) and parent.kind == "array")
        path.append(int(node.key) if is_element else node.key)
        node = parent
    path.reverse()
    return path


def _is_document(tree: JsonTree, node_id: str) -> bool:
    """True for the node that holds the whole document."""
    if node_id == ROOT_ID:
        return True
    node = tree.node(node_id)
    parent = tree.node(node.parent_id) if node.parent_id else None
    return isinstance(parent, RootNode) and parent.wraps_value


def _locate(document: Any, path: list[str | int]) -> tuple[Any, str | int]:
    """Container holding the last path step, and that step."""
    container = document
    for step in path[:-1]:
        container = container[step]
    return container, path[-1]


def update_node_value(tree: JsonTree, node_id: str, value: Any) -> Any:
    """Document value with the value at node_id replaced."""
    if _is_document(tree, node_id):
        return copy.deepcopy(value)
    document = to_value(tree)
    container, step = _locate(document, node_path(tree, node_id))
    container[step] = copy.deepcopy(value)
    return document


def rename_node_key(tree: JsonTree, node_id: str, new_key: str) -> Any:
    """
    Document value with an object member renamed in place.

    The member keeps its position. Raises ValueError when the node is not an
    object member or when new_key is already used by a sibling.
    """
    if _is_document(tree, node_id):
        raise ValueError("The document root has no key to rename")
    document = to_value(tree)
    container, old_key = _locate(document, node_path(tree, node_id))
    if not isinstance(container, dict):
        raise ValueError(f"Array elements cannot be renamed: {node_id!r}")
    if new_key == old_key:
        return document
    if new_key in container:
        raise ValueError(f"Key already exists: {new_key!r}")

    renamed = {(new_key if k == old_key else k): v for k, v in container.items()}
    container.clear()
    container.update(renamed)
    return document


def remove_node(tree: JsonTree, node_id: str) -> Any:
    """Document value with the member or element at node_id removed."""
    if _is_document(tree, node_id):
        raise ValueError("The document root cannot be removed")
    document = to_value(tree)
    container, step = _locate(document, node_path(tree, node_id))
    del container[step]
    return document
