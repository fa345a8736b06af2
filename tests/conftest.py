"""Shared test fixtures for design-diff."""

import copy
import shutil

import pytest

from design_diff.dataset import DEFINITIONS, TOKENS, build_dataset


def pytest_configure(config):
    """Register the git marker."""
    config.addinivalue_line("markers", "git: needs a git executable")


def pytest_collection_modifyitems(config, items):
    """Skip git-backed tests when git is not installed."""
    if shutil.which("git"):
        return
    skip_git = pytest.mark.skip(reason="git not found")
    for item in items:
        if "git" in item.keywords:
            item.add_marker(skip_git)


# ── Component schemas ────────────────────────────────────────────────────────

SCHEMA_URL = "http://json-schema.org/draft-07/schema#"


@pytest.fixture
def button_schema():
    """Baseline button schema."""
    return {
        "$schema": SCHEMA_URL,
        "$id": "https://example.com/button.json",
        "title": "Button Component",
        "type": "object",
        "properties": {
            "variant": {"type": "string", "enum": ["primary", "secondary"]},
            "size": {"type": "string", "enum": ["small", "medium", "large"]},
        },
        "required": ["variant"],
    }


@pytest.fixture
def non_breaking_button_schema(button_schema):
    """Wider enum and a new optional property."""
    schema = copy.deepcopy(button_schema)
    schema["properties"]["variant"]["enum"].append("tertiary")
    schema["properties"]["disabled"] = {"type": "boolean"}
    return schema


@pytest.fixture
def breaking_button_schema(button_schema):
    """Narrower enum and a newly required field."""
    schema = copy.deepcopy(button_schema)
    schema["properties"]["variant"]["enum"] = ["primary"]
    schema["required"] = ["variant", "size"]
    return schema


@pytest.fixture
def alert_schema():
    """Small schema without an identifier."""
    return {"$schema": SCHEMA_URL, "title": "Alert Component", "type": "object"}


@pytest.fixture
def make_definitions():
    """Build a definitions Dataset from a name -> schema mapping."""

    def _make(raw, **kwargs):
        return build_dataset(raw, DEFINITIONS, **kwargs)

    return _make


# ── Tokens ───────────────────────────────────────────────────────────────────


@pytest.fixture
def token_set():
    """A few tokens: plain, alias, color set."""
    return {
        "blue-500": {"value": "rgb(38, 128, 235)", "uuid": "uuid-blue-500"},
        "accent-color": {"value": "{blue-500}", "uuid": "uuid-accent"},
        "background-color": {
            "sets": {
                "light": {"value": "rgb(255, 255, 255)", "uuid": "uuid-bg-light"},
                "dark": {"value": "rgb(30, 30, 30)", "uuid": "uuid-bg-dark"},
            }
        },
        "corner-radius-100": {"value": "4px", "uuid": "uuid-radius-100"},
    }


@pytest.fixture
def make_tokens():
    """Build a tokens Dataset from a name -> token mapping."""

    def _make(raw, **kwargs):
        return build_dataset(raw, TOKENS, **kwargs)

    return _make
