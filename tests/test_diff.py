"""Tests for the structural differ."""

import copy

import pytest

from design_diff.diff import ABSENT, DiffResult, deep_equal, detailed_diff, to_jsonable


class TestDeepEqual:
    def test_nested_equal(self):
        assert deep_equal({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})

    def test_bool_is_not_int(self):
        assert not deep_equal(True, 1)
        assert not deep_equal({"x": False}, {"x": 0})

    def test_list_order_matters(self):
        assert not deep_equal(["a", "b"], ["b", "a"])

    def test_mapping_vs_list(self):
        assert not deep_equal({}, [])

    def test_int_float_equal(self):
        assert deep_equal(1, 1.0)


class TestDetailedDiff:
    def test_identical_inputs_give_empty_result(self, token_set):
        result = detailed_diff(token_set, copy.deepcopy(token_set))
        assert result.is_empty()
        assert result == DiffResult()

    def test_added_deleted_updated(self):
        original = {"a": 1, "b": 2, "c": 3}
        updated = {"a": 1, "b": 20, "d": 4}

        result = detailed_diff(original, updated)

        assert result.added == {"d": 4}
        assert result.deleted == {"c": ABSENT}
        assert result.updated == {"b": 20}

    def test_nested_subkey_removal_is_a_fragment(self):
        original = {"tok": {"value": 1, "deprecated": True}}
        updated = {"tok": {"value": 1}}

        result = detailed_diff(original, updated)

        # The entry still exists; only a sub-key vanished
        assert result.deleted == {"tok": {"deprecated": ABSENT}}
        assert result.added == {}
        assert result.updated == {}

    def test_nested_update_keeps_only_changed_keys(self):
        original = {"tok": {"value": "1px", "uuid": "u1"}}
        updated = {"tok": {"value": "2px", "uuid": "u1"}}

        result = detailed_diff(original, updated)

        assert result.updated == {"tok": {"value": "2px"}}

    def test_arrays_are_opaque(self):
        original = {"p": {"enum": ["a", "b", "c"]}}
        updated = {"p": {"enum": ["a", "c"]}}

        result = detailed_diff(original, updated)

        assert result.updated == {"p": {"enum": ["a", "c"]}}
        assert result.deleted == {}

    def test_type_change_is_update(self):
        result = detailed_diff({"a": {"b": 1}}, {"a": "flat"})
        assert result.updated == {"a": "flat"}

    def test_bool_to_int_is_update(self):
        result = detailed_diff({"a": True}, {"a": 1})
        assert result.updated == {"a": 1}

    def test_null_is_a_value(self):
        result = detailed_diff({"a": None}, {})
        assert result.deleted == {"a": ABSENT}

        result = detailed_diff({}, {"a": None})
        assert result.added == {"a": None}

    def test_inputs_not_mutated(self, token_set):
        original = copy.deepcopy(token_set)
        updated = copy.deepcopy(token_set)
        updated["blue-500"]["value"] = "rgb(0, 0, 255)"
        snapshot = (copy.deepcopy(original), copy.deepcopy(updated))

        result = detailed_diff(original, updated)
        result.updated["blue-500"]["value"] = "mutated"

        assert (original, updated) == snapshot

    def test_max_depth_reports_subtree_as_leaf(self):
        original = {"a": {"b": {"c": 1}}}
        updated = {"a": {"b": {"c": 2}}}

        assert detailed_diff(original, updated).updated == {"a": {"b": {"c": 2}}}
        assert detailed_diff(original, updated, max_depth=1).updated == {"a": {"b": {"c": 2}}}
        assert detailed_diff(original, updated, max_depth=2).updated == {"a": {"b": {"c": 2}}}

        # With depth 1 the record under "a" is the whole new value
        shallow = detailed_diff({"a": {"b": 1, "x": 0}}, {"a": {"b": 2, "x": 0}}, max_depth=1)
        assert shallow.updated == {"a": {"b": 2, "x": 0}}

    def test_deep_nesting_does_not_recurse(self):
        depth = 5000
        original: dict = {}
        updated: dict = {}
        o, u = original, updated
        for _ in range(depth):
            o["n"] = {}
            u["n"] = {}
            o, u = o["n"], u["n"]
        u["leaf"] = 1

        result = detailed_diff(original, updated, max_depth=depth + 10)

        node = result.added
        for _ in range(depth):
            node = node["n"]
        assert node == {"leaf": 1}

    def test_rejects_non_mappings(self):
        with pytest.raises(TypeError):
            detailed_diff([], {})


class TestDiffResult:
    def test_for_key_unpacks_nested_records(self):
        result = detailed_diff(
            {"btn": {"title": "A", "type": "object"}},
            {"btn": {"title": "B", "type": "object"}},
        )
        sub = result.for_key("btn")
        assert sub.updated == {"title": "B"}
        assert sub.added == {} and sub.deleted == {}

    def test_for_key_ignores_leaf_records(self):
        result = DiffResult(updated={"btn": "whole"})
        assert result.for_key("btn").is_empty()

    def test_to_dict_maps_absent_to_none(self):
        result = DiffResult(deleted={"a": ABSENT, "b": {"c": ABSENT}})
        assert result.to_dict()["deleted"] == {"a": None, "b": {"c": None}}

    def test_absent_is_a_falsy_singleton(self):
        assert not ABSENT
        assert copy.deepcopy(ABSENT) is ABSENT
        assert to_jsonable([ABSENT]) == [None]
