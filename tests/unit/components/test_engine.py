"""
Unit tests for the conversion engine.

Covers node emission, ordering, ids, edge labelling and option handling.
"""

import copy

import pytest
from jsonsea.dom import (
    ROOT_ID,
    VALUE_ID,
    ArrayNode,
    MongoSpecialNode,
    ObjectNode,
    RootNode,
    ScalarNode,
)
from jsonsea.engine import JsonTree, ParserOptions, convert_json_tree
from jsonsea.errors import UnsupportedValueKind


class TestRoot:
    def test_object_root(self):
        tree = convert_json_tree({"a": 1})
        assert isinstance(tree.root, RootNode)
        assert tree.root.kind == "object"
        assert tree.root.id == ROOT_ID
        assert tree.sea_nodes[0] is tree.root

    def test_array_root(self):
        tree = convert_json_tree([1, 2])
        assert tree.root.kind == "array"
        assert len(tree.root.child_ids) == 2

    def test_scalar_document(self):
        tree = convert_json_tree("hello")
        assert tree.root.kind == "value"
        assert tree.root.child_ids == [VALUE_ID]
        child = tree.node(VALUE_ID)
        assert isinstance(child, ScalarNode)
        assert child.key is None
        assert child.value == "hello"
        assert tree.edge_labels() == [""]

    def test_null_document(self):
        tree = convert_json_tree(None)
        child = tree.node(VALUE_ID)
        assert child.value is None
        assert child.value_type == "null"

    def test_empty_object(self):
        tree = convert_json_tree({})
        assert len(tree.sea_nodes) == 1
        assert tree.edges == []

    def test_empty_tree_has_no_root(self):
        with pytest.raises(ValueError, match="no root"):
            JsonTree().root


class TestNodes:
    def test_node_kinds(self):
        tree = convert_json_tree({"o": {}, "a": [1], "s": "x", "n": None})
        assert isinstance(tree.node("$.o"), ObjectNode)
        assert isinstance(tree.node("$.a"), ArrayNode)
        assert isinstance(tree.node("$.s"), ScalarNode)
        assert tree.node("$.n").value_type == "null"

    def test_array_size(self):
        tree = convert_json_tree({"a": [1, 2, 3]})
        assert tree.node("$.a").size == 3

    def test_scalar_type_tags(self):
        tree = convert_json_tree({"a": "5", "b": 5, "c": True, "d": None, "e": 1.5})
        tags = {node.key: node.value_type for node in tree.sea_nodes if isinstance(node, ScalarNode)}
        assert tags == {"a": "string", "b": "number", "c": "boolean", "d": "null", "e": "number"}

    def test_parent_and_children_bookkeeping(self):
        tree = convert_json_tree({"a": {"b": 1, "c": 2}})
        a = tree.node("$.a")
        assert a.parent_id == ROOT_ID
        assert a.child_ids == ["$.a.b", "$.a.c"]
        assert [child.key for child in tree.children("$.a")] == ["b", "c"]

    def test_depth(self):
        tree = convert_json_tree({"a": {"b": [1]}})
        assert tree.root.depth == 0
        assert tree.node("$.a").depth == 1
        assert tree.node("$.a.b").depth == 2
        assert tree.node("$.a.b[0]").depth == 3

    def test_entities_match_nodes(self):
        tree = convert_json_tree({"a": [1, {"b": 2}]})
        assert tree.sea_node_entities.ids == [node.id for node in tree.sea_nodes]


class TestOrdering:
    def test_preorder(self):
        tree = convert_json_tree({"a": {"x": 1}, "b": [2, 3]})
        assert [node.id for node in tree.sea_nodes] == [
            "$", "$.a", "$.a.x", "$.b", "$.b[0]", "$.b[1]",
        ]

    def test_key_order_not_sorted(self):
        tree = convert_json_tree({"z": 1, "a": 2, "m": 3})
        assert [child.key for child in tree.children(ROOT_ID)] == ["z", "a", "m"]

    def test_depth_first_matches_sea_nodes(self):
        tree = convert_json_tree({"a": {"x": [1, 2]}, "b": {"y": None}})
        assert list(tree.depth_first()) == tree.sea_nodes


class TestEdges:
    def test_labels_are_keys_and_indexes(self):
        tree = convert_json_tree({"items": ["a", "b"]})
        assert tree.edge_labels() == ["items", "0", "1"]

    def test_edge_points_parent_to_child(self):
        tree = convert_json_tree({"a": {"b": 1}})
        assert [(e.source, e.target) for e in tree.edges] == [("$", "$.a"), ("$.a", "$.a.b")]

    def test_skip_root_edges(self):
        tree = convert_json_tree({"a": {"b": 1}, "c": 2}, ParserOptions(skip_root_edges=True))
        assert [(e.source, e.target) for e in tree.edges] == [("$.a", "$.a.b")]
        assert len(tree.sea_nodes) == 4

    def test_skip_root_edges_on_value_document(self):
        tree = convert_json_tree(3, ParserOptions(skip_root_edges=True))
        assert tree.edges == []
        assert len(tree.sea_nodes) == 2


class TestMongo:
    def test_wrapper_is_terminal(self):
        doc = {"_id": {"$oid": "abc123"}, "created": {"$date": "2024-01-01T00:00:00Z"}}
        tree = convert_json_tree(doc, ParserOptions(is_mongo_data=True))
        node = tree.node("$._id")
        assert isinstance(node, MongoSpecialNode)
        assert node.kind == "objectId"
        assert node.raw == {"$oid": "abc123"}
        assert node.child_ids == []
        assert tree.node("$.created").kind == "date"
        assert len(tree.sea_nodes) == 3

    def test_wrapper_expanded_without_mongo_mode(self):
        tree = convert_json_tree({"_id": {"$oid": "abc123"}})
        assert isinstance(tree.node("$._id"), ObjectNode)
        assert '$._id["$oid"]' in tree.sea_node_entities

    def test_top_level_wrapper(self):
        tree = convert_json_tree({"$oid": "abc"}, ParserOptions(is_mongo_data=True))
        assert tree.root.kind == "value"
        assert isinstance(tree.node(VALUE_ID), MongoSpecialNode)

    def test_raw_is_a_copy(self):
        doc = {"_id": {"$oid": "abc"}}
        tree = convert_json_tree(doc, ParserOptions(is_mongo_data=True))
        tree.node("$._id").raw["$oid"] = "changed"
        assert doc["_id"]["$oid"] == "abc"


class TestPurity:
    def test_input_not_mutated(self):
        doc = {"a": [1, {"b": None}], "c": {"$oid": "x"}}
        before = copy.deepcopy(doc)
        convert_json_tree(doc, ParserOptions(is_mongo_data=True, skip_root_edges=True))
        assert doc == before

    def test_deep_nesting_does_not_recurse(self):
        doc = value = []
        for _ in range(2000):
            inner = []
            value.append(inner)
            value = inner
        tree = convert_json_tree(doc)
        assert len(tree.sea_nodes) == 2001
        assert len(tree.edges) == 2000


class TestErrors:
    def test_unsupported_leaf(self):
        with pytest.raises(UnsupportedValueKind):
            convert_json_tree({"a": object()})

    def test_unsupported_top_level(self):
        with pytest.raises(UnsupportedValueKind):
            convert_json_tree({1, 2})

    def test_non_string_key(self):
        with pytest.raises(UnsupportedValueKind):
            convert_json_tree({1: "a"})

    def test_nan(self):
        with pytest.raises(UnsupportedValueKind):
            convert_json_tree([float("nan")])
