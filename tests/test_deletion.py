"""Tests for deletion disambiguation."""

import pytest

from design_diff.dataset import parse_token_entry
from design_diff.diff import (
    ABSENT,
    RenameRecord,
    carries_deprecated_marker,
    detailed_diff,
    detect_renames,
    resolve_deletions,
)


class TestCarriesDeprecatedMarker:
    def test_true_marker(self):
        assert carries_deprecated_marker({"deprecated": True, "value": 1})

    def test_string_marker(self):
        assert carries_deprecated_marker({"deprecated": "use blue-600"})

    def test_false_marker(self):
        assert not carries_deprecated_marker({"deprecated": False})

    def test_removed_marker_fragment(self):
        assert not carries_deprecated_marker({"deprecated": ABSENT})

    def test_non_mapping(self):
        assert not carries_deprecated_marker(ABSENT)
        assert not carries_deprecated_marker("deprecated")

    def test_custom_field(self):
        assert carries_deprecated_marker({"obsolete": True}, "obsolete")
        assert not carries_deprecated_marker({"deprecated": True}, "obsolete")

    def test_empty_message_and_null_are_not_markers(self):
        assert not carries_deprecated_marker({"deprecated": ""})
        assert not carries_deprecated_marker({"deprecated": None})

    @pytest.mark.parametrize("marker", [True, False, "use blue-600", ""])
    def test_agrees_with_token_entry(self, marker):
        entry = parse_token_entry("blue-500", {"value": "#00f", "deprecated": marker})
        assert carries_deprecated_marker({"deprecated": marker}) is entry.is_deprecated


class TestResolveDeletions:
    def test_present_fragment_without_marker_is_dropped(self):
        assert resolve_deletions({}, {"a": {"value": 1}}) == {}

    def test_whole_entry_gone_is_kept(self):
        assert resolve_deletions({}, {"a": ABSENT}) == {"a": ABSENT}

    def test_deprecated_marker_is_kept(self):
        raw = {"a": {"value": 1, "deprecated": True}}
        assert resolve_deletions({}, raw) == raw

    def test_rename_wins_over_absent(self):
        renames = {"b": RenameRecord(old_name="a", identifier="x")}
        assert resolve_deletions(renames, {"a": ABSENT}) == {}

    def test_rename_wins_over_deprecated_marker(self):
        renames = {"b": RenameRecord(old_name="a")}
        assert resolve_deletions(renames, {"a": {"deprecated": True}}) == {}

    def test_only_old_names_are_excluded(self):
        renames = {"b": RenameRecord(old_name="a")}
        assert resolve_deletions(renames, {"b": ABSENT, "c": ABSENT}) == {"b": ABSENT, "c": ABSENT}


class TestDeletionPipeline:
    def test_sub_field_removal_is_not_a_deletion(self):
        original = {"tok": {"value": 1, "deprecated_comment": "old"}}
        updated = {"tok": {"value": 1}}

        diff = detailed_diff(original, updated)
        assert resolve_deletions({}, diff.deleted) == {}

    def test_undeprecation_is_not_a_deletion(self):
        original = {"tok": {"value": 1, "deprecated": True}}
        updated = {"tok": {"value": 1}}

        diff = detailed_diff(original, updated)
        assert resolve_deletions({}, diff.deleted) == {}

    def test_renamed_token_is_not_deleted(self, token_set):
        updated = dict(token_set)
        updated["accent-color-default"] = updated.pop("accent-color")

        diff = detailed_diff(token_set, updated)
        renames = detect_renames(token_set, diff.added)

        assert "accent-color" in diff.deleted
        assert resolve_deletions(renames, diff.deleted) == {}

    def test_removed_token_is_deleted(self, token_set):
        updated = dict(token_set)
        del updated["corner-radius-100"]

        diff = detailed_diff(token_set, updated)
        assert resolve_deletions({}, diff.deleted) == {"corner-radius-100": ABSENT}
