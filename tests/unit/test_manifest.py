"""Tests for reading ``package.json`` manifests."""

from __future__ import annotations

import typing as typ

import pytest

from ballast.workspace import (
    ManifestNotFoundError,
    ManifestParseError,
    WorkspaceParseError,
    load_manifest,
    read_manifest,
)
from tests.helpers.workspace_helpers import write_package

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_read_manifest_parses_fields(tmp_path: Path) -> None:
    """Populate the record from the manifest's name, version and dependencies."""
    manifest_path = write_package(
        tmp_path,
        "pkg",
        name="pkg",
        version="1.2.3",
        dependencies={"left-pad": "^1.0.0"},
        devDependencies={"vitest": "workspace:*"},
    )

    record = read_manifest(tmp_path / "pkg")

    assert record.manifest_path == manifest_path
    assert record.root_path == tmp_path / "pkg"
    assert record.name == "pkg"
    assert record.version == "1.2.3"
    assert record.dependencies == {"left-pad": "^1.0.0"}
    assert record.dev_dependencies == {"vitest": "workspace:*"}


def test_read_manifest_defaults_missing_fields(tmp_path: Path) -> None:
    """Absent fields become ``None`` or empty mappings rather than errors."""
    write_package(tmp_path, "bare")

    record = read_manifest(tmp_path / "bare")

    assert record.name is None
    assert record.version is None
    assert record.dependencies == {}
    assert record.dev_dependencies == {}


def test_load_manifest_treats_null_dependency_tables_as_empty(tmp_path: Path) -> None:
    """``null`` dependency tables are normalised to empty mappings."""
    manifest_path = tmp_path / "package.json"
    manifest_path.write_text(
        '{"name": "pkg", "dependencies": null, "devDependencies": null}',
        encoding="utf-8",
    )

    record = load_manifest(manifest_path)

    assert record.dependencies == {}
    assert record.dev_dependencies == {}


def test_load_manifest_ignores_unknown_keys(tmp_path: Path) -> None:
    """Fields outside the consumed subset do not affect decoding."""
    manifest_path = tmp_path / "package.json"
    manifest_path.write_text(
        '{"name": "pkg", "private": true, "scripts": {"build": "tsc"}}',
        encoding="utf-8",
    )

    assert load_manifest(manifest_path).name == "pkg"


def test_read_manifest_missing_file(tmp_path: Path) -> None:
    """A directory without ``package.json`` raises ``ManifestNotFoundError``."""
    with pytest.raises(ManifestNotFoundError) as excinfo:
        read_manifest(tmp_path)

    assert excinfo.value.path == tmp_path / "package.json"


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("{not json", id="malformed_json"),
        pytest.param("[1, 2, 3]", id="non_object_payload"),
        pytest.param('{"name": 42}', id="non_string_name"),
        pytest.param('{"dependencies": ["a"]}', id="non_mapping_dependencies"),
    ],
)
def test_load_manifest_parse_errors(tmp_path: Path, content: str) -> None:
    """Undecodable manifests raise ``ManifestParseError`` naming the file."""
    manifest_path = tmp_path / "package.json"
    manifest_path.write_text(content, encoding="utf-8")

    with pytest.raises(ManifestParseError) as excinfo:
        load_manifest(manifest_path)

    assert isinstance(excinfo.value, WorkspaceParseError)
    assert not isinstance(excinfo.value, ManifestNotFoundError)
    assert str(manifest_path) in str(excinfo.value)
