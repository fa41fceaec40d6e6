"""Tests for treeforge_lib.context."""

from __future__ import annotations

from pathlib import Path

import pytest

from treeforge_lib.context import load_context, parse_params


def test_parse_params_accepts_all_separators() -> None:
    params = parse_params(["service=happiness", "group:peanuts", "'quoted=yes'", "spaced value"])

    assert params == {"service": "happiness", "group": "peanuts", "quoted": "yes", "spaced": "value"}


def test_parse_params_collects_repeated_keys() -> None:
    params = parse_params(["adapter=http", "adapter=kafka", "name=x"])

    assert params == {"adapter": ["http", "kafka"], "name": "x"}


def test_parse_params_rejects_bare_keys() -> None:
    with pytest.raises(ValueError, match="Invalid -p parameter"):
        parse_params(["lonely"])


def test_parse_params_empty() -> None:
    assert parse_params(None) == {}
    assert parse_params(["", "  "]) == {}


def test_load_context_reads_json_and_yaml(tmp_path: Path) -> None:
    json_file = tmp_path / "context.json"
    json_file.write_text('{"Name": "test", "Modules": [{"name": "a"}]}', encoding="utf-8")
    yaml_file = tmp_path / "context.yaml"
    yaml_file.write_text("Name: test\nModules:\n  - name: a\n", encoding="utf-8")

    assert load_context(str(json_file)) == load_context(str(yaml_file)) == {
        "Name": "test",
        "Modules": [{"name": "a"}],
    }


def test_load_context_empty_file_is_empty_mapping(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    assert load_context(str(empty)) == {}


def test_load_context_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text('{"Name": [', encoding="utf-8")

    with pytest.raises(ValueError, match="not valid JSON or YAML"):
        load_context(str(broken))
    with pytest.raises(ValueError, match="does not exist"):
        load_context(str(tmp_path / "missing.json"))
