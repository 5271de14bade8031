"""Unit tests for the serialization inverse and node edits."""

import json

import pytest
from jsonsea.dom import VALUE_ID
from jsonsea.engine import ParserOptions, convert_json_tree
from jsonsea.jsonutil import parse
from jsonsea.serialize import (
    node_path,
    remove_node,
    rename_node_key,
    serialize,
    to_value,
    update_node_value,
)

MONGO = ParserOptions(is_mongo_data=True)


class TestToValue:
    @pytest.mark.parametrize("doc", [
        {},
        [],
        {"a": 1, "b": [True, None, "x"], "c": {"d": {"e": []}}},
        [[1, [2, [3]]], {"k": {}}],
        "plain",
        0,
        None,
        False,
    ])
    def test_rebuilds_document(self, doc):
        assert to_value(convert_json_tree(doc)) == doc

    def test_preserves_key_order(self):
        value = to_value(convert_json_tree({"z": 1, "a": {"y": 2, "b": 3}}))
        assert list(value) == ["z", "a"]
        assert list(value["a"]) == ["y", "b"]

    def test_keeps_string_and_number_apart(self):
        value = to_value(convert_json_tree({"a": "5", "b": 5}))
        assert value["a"] == "5"
        assert value["b"] == 5
        assert isinstance(value["b"], int)

    def test_mongo_wrapper_restored(self):
        doc = {"_id": {"$oid": "abc123"}, "at": {"$date": {"$numberLong": "1"}}}
        assert to_value(convert_json_tree(doc, MONGO)) == doc

    def test_subtree(self):
        tree = convert_json_tree({"a": {"b": [1, 2]}})
        assert to_value(tree, "$.a") == {"b": [1, 2]}

    def test_skip_root_edges_does_not_lose_members(self):
        doc = {"x": 1, "y": [2]}
        tree = convert_json_tree(doc, ParserOptions(skip_root_edges=True))
        assert to_value(tree) == doc

    def test_output_is_detached_from_tree(self):
        tree = convert_json_tree({"_id": {"$oid": "a"}}, MONGO)
        value = to_value(tree)
        value["_id"]["$oid"] = "b"
        assert tree.node("$._id").raw == {"$oid": "a"}


class TestSerialize:
    def test_round_trip_text(self):
        text = '{"a": "5", "b": 5, "c": true, "d": null, "e": [1.5, {}]}'
        assert parse(serialize(convert_json_tree(parse(text)))) == parse(text)

    def test_indent(self):
        text = serialize(convert_json_tree({"a": 1}), indent=2)
        assert text == '{\n  "a": 1\n}'

    def test_compact(self):
        assert serialize(convert_json_tree([1, 2]), indent=None) == "[1, 2]"

    def test_unicode_kept(self):
        assert "café" in serialize(convert_json_tree({"name": "café"}))

    def test_mongo_verbatim(self):
        tree = convert_json_tree({"$oid": "abc123"}, MONGO)
        assert json.loads(serialize(tree)) == {"$oid": "abc123"}


class TestNodePath:
    def test_member_and_element_path(self):
        tree = convert_json_tree({"a": [{"b": 1}]})
        assert node_path(tree, "$.a[0].b") == ["a", 0, "b"]

    def test_top_level_array(self):
        tree = convert_json_tree([[1, 2]])
        assert node_path(tree, "$[0][1]") == [0, 1]

    def test_value_document(self):
        tree = convert_json_tree("x")
        assert node_path(tree, VALUE_ID) == []


class TestEdits:
    def test_update_scalar(self):
        tree = convert_json_tree({"a": {"b": 1}, "c": 2})
        assert update_node_value(tree, "$.a.b", "one") == {"a": {"b": "one"}, "c": 2}

    def test_update_replaces_subtree(self):
        tree = convert_json_tree({"a": [1, 2]})
        assert update_node_value(tree, "$.a", {"n": None}) == {"a": {"n": None}}

    def test_update_array_element(self):
        tree = convert_json_tree([1, 2, 3])
        assert update_node_value(tree, "$[1]", 20) == [1, 20, 3]

    def test_update_whole_document(self):
        tree = convert_json_tree({"a": 1})
        assert update_node_value(tree, "$", [1]) == [1]

    def test_update_value_document(self):
        tree = convert_json_tree(5)
        assert update_node_value(tree, VALUE_ID, 6) == 6

    def test_update_leaves_tree_alone(self):
        tree = convert_json_tree({"a": 1})
        update_node_value(tree, "$.a", 2)
        assert tree.node("$.a").value == 1

    def test_rename_keeps_position(self):
        tree = convert_json_tree({"a": 1, "b": 2, "c": 3})
        value = rename_node_key(tree, "$.b", "z")
        assert list(value.items()) == [("a", 1), ("z", 2), ("c", 3)]

    def test_rename_nested(self):
        tree = convert_json_tree({"outer": {"old": True}})
        assert rename_node_key(tree, "$.outer.old", "new") == {"outer": {"new": True}}

    def test_rename_collision(self):
        tree = convert_json_tree({"a": 1, "b": 2})
        with pytest.raises(ValueError, match="already exists"):
            rename_node_key(tree, "$.a", "b")

    def test_rename_same_key(self):
        tree = convert_json_tree({"a": 1})
        assert rename_node_key(tree, "$.a", "a") == {"a": 1}

    def test_rename_array_element_rejected(self):
        tree = convert_json_tree({"a": [1]})
        with pytest.raises(ValueError, match="Array elements"):
            rename_node_key(tree, "$.a[0]", "x")

    def test_rename_root_rejected(self):
        with pytest.raises(ValueError):
            rename_node_key(convert_json_tree({}), "$", "x")

    def test_remove_member(self):
        tree = convert_json_tree({"a": 1, "b": {"c": 2}})
        assert remove_node(tree, "$.b.c") == {"a": 1, "b": {}}

    def test_remove_element(self):
        tree = convert_json_tree({"a": [1, 2, 3]})
        assert remove_node(tree, "$.a[0]") == {"a": [2, 3]}

    def test_remove_root_rejected(self):
        with pytest.raises(ValueError):
            remove_node(convert_json_tree([1]), "$")

    def test_edit_unknown_node(self):
        with pytest.raises(KeyError):
            update_node_value(convert_json_tree({"a": 1}), "$.nope", 1)

    def test_edit_mongo_node(self):
        tree = convert_json_tree({"_id": {"$oid": "a"}}, MONGO)
        assert update_node_value(tree, "$._id", {"$oid": "b"}) == {"_id": {"$oid": "b"}}
