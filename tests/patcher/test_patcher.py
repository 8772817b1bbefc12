"""Tests for patch_document, assign_at_path and keep_containers.

Covers:
- Whole-document replacement at the empty path
- Nested overwrite with siblings and member order untouched
- New keys appended; array overwrite and append-at-length
- ParseError / PathResolutionError returned with the input text unchanged,
  including for over-long integers and deep nesting
- Round trip: the patched value resolves back at its path
- Persistent update: the source tree is never mutated and off-path subtrees
  are shared
- preserve_containers carries hidden array/object members over
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from json_node_edit.config import EditorConfig
from json_node_edit.errors import ParseError, PathResolutionError
from json_node_edit.patcher import assign_at_path, keep_containers, patch_document
from json_node_edit.paths import resolve_path
from json_node_edit.serializer import ParseCache, parse_document
from json_node_edit.values import JsonNumber, JsonObject, from_python, to_python


class TestRootReplacement:
    def test_empty_path_replaces_document(self) -> None:
        result = patch_document('{"a":1}', [], {"b": 2})
        assert result.ok
        assert json.loads(result.text) == {"b": 2}
        assert result.text == '{\n  "b": 2\n}'

    def test_none_path_is_root(self) -> None:
        assert patch_document("[1]", None, 5).text == "5"

    def test_root_replace_of_malformed_document_fails(self) -> None:
        result = patch_document("{oops", [], {"b": 2})
        assert isinstance(result.error, ParseError)
        assert result.text == "{oops"


class TestNestedAssignment:
    def test_overwrite_keeps_siblings_and_order(self) -> None:
        result = patch_document('{"a":{"b":1,"c":2},"d":3}', ["a", "b"], 5)
        assert result.text == (
            '{\n  "a": {\n    "b": 5,\n    "c": 2\n  },\n  "d": 3\n}'
        )

    def test_single_nested_key(self) -> None:
        result = patch_document('{"a":{"b":1}}', ["a", "b"], 5)
        assert json.loads(result.text) == {"a": {"b": 5}}

    def test_new_key_is_appended(self) -> None:
        result = patch_document('{"a":1}', ["b"], 2)
        assert list(json.loads(result.text).items()) == [("a", 1), ("b", 2)]

    def test_array_overwrite(self) -> None:
        result = patch_document('{"xs":[1,2,3]}', ["xs", 1], {"y": True})
        assert json.loads(result.text) == {"xs": [1, {"y": True}, 3]}

    def test_array_append_at_length(self) -> None:
        assert json.loads(patch_document("[1,2]", [2], 3).text) == [1, 2, 3]

    def test_through_array_of_objects(self) -> None:
        doc = '{"customer":[{"name":"A","age":1}]}'
        result = patch_document(doc, ("customer", 0, "name"), "B")
        assert json.loads(result.text) == {"customer": [{"name": "B", "age": 1}]}

    def test_replace_container_with_scalar(self) -> None:
        result = patch_document('{"a":{"b":[1]}}', ["a"], None)
        assert json.loads(result.text) == {"a": None}

    def test_config_indent(self) -> None:
        result = patch_document('{"a":1}', ["a"], 2, config=EditorConfig(indent=0))
        assert result.text == '{\n"a": 2\n}'


class TestFailures:
    def test_malformed_document_is_returned_unchanged(self) -> None:
        result = patch_document("not json", ["a"], 1)
        assert result.text == "not json"
        assert not result.ok
        assert isinstance(result.error, ParseError)

    def test_unwrap_raises_carried_error(self) -> None:
        with pytest.raises(ParseError):
            patch_document("not json", ["a"], 1).unwrap()

    def test_missing_intermediate_key(self) -> None:
        result = patch_document('{"a":1}', ["x", "y"], 1)
        assert isinstance(result.error, PathResolutionError)
        assert result.error.index == 0
        assert result.text == '{"a":1}'

    def test_intermediate_scalar(self) -> None:
        result = patch_document('{"a":1}', ["a", "y"], 1)
        assert isinstance(result.error, PathResolutionError)
        assert result.error.index == 1

    def test_key_on_array(self) -> None:
        result = patch_document("[1]", ["a"], 1)
        assert isinstance(result.error, PathResolutionError)

    def test_index_on_object(self) -> None:
        result = patch_document('{"a":1}', [0], 1)
        assert isinstance(result.error, PathResolutionError)

    @pytest.mark.parametrize("index", [3, 10, -1])
    def test_index_out_of_range(self, index: int) -> None:
        result = patch_document("[1,2]", [index], 0)
        assert isinstance(result.error, PathResolutionError)
        assert result.text == "[1,2]"

    def test_intermediate_index_out_of_range(self) -> None:
        result = patch_document('{"xs":[]}', ["xs", 0, "a"], 1)
        assert isinstance(result.error, PathResolutionError)
        assert result.error.index == 1

    def test_non_json_value_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            patch_document('{"a":1}', ["a"], object())

    def test_over_long_integer_document(self) -> None:
        document = '{"a": ' + "1" * 5000 + "}"
        result = patch_document(document, ["a"], 1)
        assert isinstance(result.error, ParseError)
        assert result.text == document

    def test_deeply_nested_document(self) -> None:
        document = "[" * 100_000 + "]" * 100_000
        result = patch_document(document, [], 1)
        assert isinstance(result.error, ParseError)
        assert result.text == document

    def test_unwritable_value_is_returned_as_parse_error(self) -> None:
        result = patch_document('{"a":1}', ["a"], 10**5000)
        assert isinstance(result.error, ParseError)
        assert result.text == '{"a":1}'


class TestRoundTrip:
    @pytest.mark.parametrize(
        ("document", "path", "value"),
        [
            ({"a": {"b": 1}}, ("a", "b"), 5),
            ({"a": {"b": 1}}, ("a", "c"), [1, {"d": None}]),
            ({"xs": [{"k": "v"}, 2]}, ("xs", 0, "k"), "w"),
            ({"xs": [1, 2]}, ("xs", 2), {"new": True}),
            ([[0, 1], [2]], (1, 0), -3.5),
            ({"a": 1}, (), "root"),
        ],
    )
    def test_patched_value_resolves_back(
        self, document: Any, path: tuple[Any, ...], value: Any
    ) -> None:
        result = patch_document(json.dumps(document), path, value)
        assert result.ok
        resolved = resolve_path(parse_document(result.text), path)
        assert resolved == from_python(value)


class TestAssignAtPath:
    def test_source_tree_is_not_mutated(self) -> None:
        root = parse_document('{"a":{"b":1},"other":{"x":[1,2]}}')
        updated = assign_at_path(root, ("a", "b"), 2)
        assert to_python(root) == {"a": {"b": 1}, "other": {"x": [1, 2]}}
        assert to_python(updated) == {"a": {"b": 2}, "other": {"x": [1, 2]}}

    def test_off_path_subtrees_are_shared(self) -> None:
        root = parse_document('{"a":{"b":1},"other":{"x":[1,2]}}')
        updated = assign_at_path(root, ("a", "b"), 2)
        assert isinstance(root, JsonObject)
        assert isinstance(updated, JsonObject)
        assert updated.get("other") is root.get("other")

    def test_accepts_tagged_value(self) -> None:
        root = parse_document("[0]")
        assert to_python(assign_at_path(root, (0,), JsonNumber(4))) == [4]

    def test_raises_path_resolution_error(self) -> None:
        with pytest.raises(PathResolutionError):
            assign_at_path(parse_document("{}"), ("a", "b"), 1)


class TestParseCacheUse:
    def test_document_is_cached(self) -> None:
        cache = ParseCache()
        patch_document('{"a":1}', ["a"], 2, cache=cache)
        assert '{"a":1}' in cache

    def test_cached_tree_is_not_mutated_by_patch(self) -> None:
        cache = ParseCache()
        first = patch_document('{"a":1}', ["a"], 2, cache=cache)
        second = patch_document('{"a":1}', ["b"], 3, cache=cache)
        assert json.loads(first.text) == {"a": 2}
        assert json.loads(second.text) == {"a": 1, "b": 3}


class TestPreserveContainers:
    def test_hidden_containers_are_kept(self) -> None:
        doc = '{"name":"Ada","tags":["x"],"meta":{"k":1},"age":3}'
        result = patch_document(
            doc, [], {"name": "Grace", "age": 4}, preserve_containers=True
        )
        assert list(json.loads(result.text).items()) == [
            ("name", "Grace"),
            ("tags", ["x"]),
            ("meta", {"k": 1}),
            ("age", 4),
        ]

    def test_removed_scalars_are_dropped(self) -> None:
        result = patch_document(
            '{"a":1,"b":2,"c":[]}', [], {"a": 1}, preserve_containers=True
        )
        assert json.loads(result.text) == {"a": 1, "c": []}

    def test_nested_node(self) -> None:
        doc = '{"user":{"name":"A","roles":["admin"]},"n":1}'
        result = patch_document(
            doc, ["user"], {"name": "B", "email": "b@x"}, preserve_containers=True
        )
        assert json.loads(result.text) == {
            "user": {"name": "B", "roles": ["admin"], "email": "b@x"},
            "n": 1,
        }

    def test_default_is_plain_replacement(self) -> None:
        result = patch_document('{"a":1,"c":[]}', [], {"a": 2})
        assert json.loads(result.text) == {"a": 2}

    def test_non_object_edit_replaces(self) -> None:
        result = patch_document('{"c":[1]}', [], 5, preserve_containers=True)
        assert result.text == "5"

    def test_keep_containers_edited_keys_win(self) -> None:
        current = from_python({"a": [1], "b": 1})
        edited = from_python({"a": [2]})
        assert to_python(keep_containers(current, edited)) == {"a": [2]}

    def test_keep_containers_with_missing_current(self) -> None:
        edited = from_python({"a": 1})
        assert keep_containers(None, edited) is edited
