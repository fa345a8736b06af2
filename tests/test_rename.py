"""Tests for identifier-based rename detection."""

import logging

from design_diff.diff import RenameRecord, build_identity_index, detailed_diff, detect_renames


class TestBuildIdentityIndex:
    def test_indexes_plain_and_set_tokens(self, token_set):
        index = build_identity_index(token_set, "uuid")
        assert index["uuid-blue-500"] == "blue-500"
        assert index["uuid-bg-light"] == "background-color"
        assert index["uuid-bg-dark"] == "background-color"

    def test_entries_without_identifier_are_skipped(self):
        assert build_identity_index({"a": {"value": 1}}, "uuid") == {}

    def test_duplicate_identifier_keeps_first(self, caplog):
        dataset = {"a": {"value": 1, "uuid": "same"}, "b": {"value": 2, "uuid": "same"}}
        with caplog.at_level(logging.WARNING, logger="design_diff"):
            index = build_identity_index(dataset, "uuid")
        assert index == {"same": "a"}
        assert "same" in caplog.text


class TestDetectRenames:
    def test_simple_rename(self, token_set):
        updated = dict(token_set)
        updated["corner-radius-small"] = updated.pop("corner-radius-100")
        added = detailed_diff(token_set, updated).added

        renames = detect_renames(token_set, added, "uuid")

        assert renames == {
            "corner-radius-small": RenameRecord(old_name="corner-radius-100", identifier="uuid-radius-100")
        }

    def test_set_token_rename(self, token_set):
        updated = dict(token_set)
        updated["background-color-default"] = updated.pop("background-color")

        renames = detect_renames(token_set, detailed_diff(token_set, updated).added)

        assert renames["background-color-default"].old_name == "background-color"

    def test_added_without_identifier_is_not_a_rename(self, token_set):
        renames = detect_renames(token_set, {"new-token": {"value": "1px"}})
        assert renames == {}

    def test_new_identifier_is_not_a_rename(self, token_set):
        renames = detect_renames(token_set, {"new-token": {"value": "1px", "uuid": "fresh"}})
        assert renames == {}

    def test_existing_name_is_never_a_rename(self, token_set):
        # A fragment of an entry present on both sides
        renames = detect_renames(token_set, {"blue-500": {"uuid": "uuid-accent"}})
        assert renames == {}

    def test_swapped_names(self):
        original = {"a": {"value": 1, "uuid": "id-a"}, "b": {"value": 2, "uuid": "id-b"}}
        updated = {"c": {"value": 1, "uuid": "id-a"}, "d": {"value": 2, "uuid": "id-b"}}

        renames = detect_renames(original, detailed_diff(original, updated).added)

        assert {n: r.old_name for n, r in renames.items()} == {"c": "a", "d": "b"}

    def test_custom_identifier_field(self):
        original = {"button": {"$id": "btn"}}
        renames = detect_renames(original, {"action-button": {"$id": "btn"}}, "$id")
        assert renames["action-button"].old_name == "button"

    def test_index_is_rebuilt_per_call(self):
        first = {"a": {"value": 1, "uuid": "x"}}
        second = {"b": {"value": 1, "uuid": "x"}}
        assert detect_renames(first, {"z": {"value": 1, "uuid": "x"}})["z"].old_name == "a"
        assert detect_renames(second, {"z": {"value": 1, "uuid": "x"}})["z"].old_name == "b"
