"""Tests for pnpm workspace discovery."""

from __future__ import annotations

import typing as typ

import pytest

from ballast.workspace import (
    PNPM_WORKSPACE_FILE,
    ManifestParseError,
    WorkspaceConfigNotFoundError,
    WorkspaceConfigParseError,
    expand_patterns,
    load_packages,
    load_workspace_manifest,
    manifest_candidates,
    search_workspaces,
)
from tests.helpers.workspace_helpers import write_package, write_pnpm_workspace

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Return a resolved workspace root."""
    return tmp_path.resolve()


def test_search_workspaces_discovers_members(root: Path) -> None:
    """Every globbed directory with a manifest becomes one record."""
    write_pnpm_workspace(root, ["packages/*"])
    a_manifest = write_package(root, "packages/a", name="a", version="1.0.0")
    b_manifest = write_package(
        root,
        "packages/b",
        name="b",
        version="2.0.0",
        dependencies={"a": "1.0.0"},
    )

    workspace = search_workspaces(root)

    assert workspace.workspace_root == root
    assert [package.name for package in workspace.packages] == ["a", "b"]
    assert [package.manifest_path for package in workspace.packages] == [
        a_manifest,
        b_manifest,
    ]
    assert workspace.package_names == ("a", "b")


def test_search_workspaces_skips_directories_without_manifest(root: Path) -> None:
    """Glob matches lacking ``package.json`` are silently excluded."""
    write_pnpm_workspace(root, ["packages/*"])
    write_package(root, "packages/a", name="a", version="1.0.0")
    (root / "packages" / "docs").mkdir()
    (root / "packages" / "README.md").write_text("notes", encoding="utf-8")

    workspace = search_workspaces(root)

    assert [package.name for package in workspace.packages] == ["a"]


def test_search_workspaces_without_manifests_is_empty(root: Path) -> None:
    """Matches without any manifests yield an empty workspace."""
    write_pnpm_workspace(root, ["packages/*"])
    (root / "packages" / "empty").mkdir(parents=True)

    assert search_workspaces(root).packages == ()


def test_search_workspaces_keeps_pattern_order_and_duplicates(root: Path) -> None:
    """Patterns are expanded independently and concatenated in order."""
    write_pnpm_workspace(root, ["tools/*", "packages/*", "packages/b"])
    write_package(root, "packages/b", name="b")
    write_package(root, "packages/a", name="a")
    write_package(root, "tools/z", name="z")

    workspace = search_workspaces(root)

    assert [package.name for package in workspace.packages] == ["z", "a", "b", "b"]


def test_search_workspaces_supports_recursive_patterns(root: Path) -> None:
    """``**`` patterns reach nested package directories."""
    write_pnpm_workspace(root, ["apps/**"])
    write_package(root, "apps/web", name="web")
    write_package(root, "apps/group/api", name="api")

    names = {package.name for package in search_workspaces(root).packages}

    assert names == {"web", "api"}


def test_search_workspaces_keeps_symlinked_member_location(root: Path) -> None:
    """Symlinked members are reported where the pattern matched them."""
    write_pnpm_workspace(root, ["packages/*"])
    write_package(root, "vendor/real", name="real")
    (root / "packages").mkdir()
    (root / "packages" / "link").symlink_to(
        root / "vendor" / "real", target_is_directory=True
    )

    workspace = search_workspaces(root)

    (package,) = workspace.packages
    assert package.manifest_path == root / "packages" / "link" / "package.json"
    assert package.root_path == root / "packages" / "link"


def test_search_workspaces_keeps_symlinked_root(tmp_path: Path) -> None:
    """A workspace reached through a symlink keeps the symlinked root."""
    real_root = tmp_path / "real"
    real_root.mkdir()
    write_pnpm_workspace(real_root, ["packages/*"])
    write_package(real_root, "packages/a", name="a")
    linked_root = tmp_path / "linked"
    linked_root.symlink_to(real_root, target_is_directory=True)

    workspace = search_workspaces(linked_root)

    assert workspace.workspace_root == linked_root
    assert workspace.packages[0].root_path == linked_root / "packages" / "a"


def test_search_workspaces_is_deterministic(root: Path) -> None:
    """Repeated scans of an unchanged tree produce equal workspaces."""
    write_pnpm_workspace(root, ["packages/*"])
    for name in ("c", "a", "b"):
        write_package(root, f"packages/{name}", name=name)

    assert search_workspaces(root) == search_workspaces(root)


def test_search_workspaces_aborts_on_malformed_manifest(root: Path) -> None:
    """A single undecodable manifest fails the whole scan."""
    write_pnpm_workspace(root, ["packages/*"])
    write_package(root, "packages/a", name="a")
    broken = root / "packages" / "b"
    broken.mkdir(parents=True)
    (broken / "package.json").write_text("{", encoding="utf-8")

    with pytest.raises(ManifestParseError):
        search_workspaces(root)


def test_search_workspaces_missing_configuration(root: Path) -> None:
    """A missing ``pnpm-workspace.yaml`` raises a dedicated error."""
    with pytest.raises(WorkspaceConfigNotFoundError) as excinfo:
        search_workspaces(root)

    assert not isinstance(excinfo.value, OSError)
    assert PNPM_WORKSPACE_FILE in str(excinfo.value)
    assert excinfo.value.workspace_root == root


@pytest.mark.parametrize(
    ("content", "expected_message"),
    [
        pytest.param("packages: [unclosed", "invalid YAML", id="malformed_yaml"),
        pytest.param("", "mapping", id="empty_document"),
        pytest.param("- packages/*\n", "mapping", id="list_document"),
        pytest.param("catalog: {}\n", "missing 'packages'", id="missing_packages"),
        pytest.param("packages: packages/*\n", "must be a list", id="scalar"),
        pytest.param("packages:\n  - 1\n", "packages[0]", id="non_string_entry"),
    ],
)
def test_load_workspace_manifest_parse_errors(
    root: Path, content: str, expected_message: str
) -> None:
    """Unusable configuration documents raise ``WorkspaceConfigParseError``."""
    (root / PNPM_WORKSPACE_FILE).write_text(content, encoding="utf-8")

    with pytest.raises(WorkspaceConfigParseError) as excinfo:
        load_workspace_manifest(root)

    assert expected_message in str(excinfo.value)
    assert excinfo.value.path == root / PNPM_WORKSPACE_FILE


def test_load_workspace_manifest_rejects_undecodable_bytes(root: Path) -> None:
    """A configuration that is not valid UTF-8 is a parse error."""
    config_path = root / PNPM_WORKSPACE_FILE
    config_path.write_bytes(b"packages:\n  - '\xff\xfe'\n")

    with pytest.raises(WorkspaceConfigParseError) as excinfo:
        search_workspaces(root)

    assert excinfo.value.path == config_path
    assert "not valid UTF-8" in str(excinfo.value)


def test_load_workspace_manifest_reads_patterns(root: Path) -> None:
    """Patterns are returned in document order."""
    config_path = write_pnpm_workspace(root, ["packages/*", "apps/*"])

    manifest = load_workspace_manifest(root)

    assert manifest.path == config_path
    assert manifest.packages == ("packages/*", "apps/*")


def test_expand_patterns_returns_absolute_paths(root: Path) -> None:
    """Matches are anchored at the workspace root."""
    (root / "packages" / "b").mkdir(parents=True)
    (root / "packages" / "a").mkdir(parents=True)

    directories = expand_patterns(root, ["packages/*", "missing/*"])

    assert directories == [root / "packages" / "a", root / "packages" / "b"]


def test_manifest_candidates_filters_missing_manifests(root: Path) -> None:
    """Only directories containing ``package.json`` survive the filter."""
    manifest_path = write_package(root, "with", name="with")
    (root / "without").mkdir()

    candidates = manifest_candidates([root / "with", root / "without"])

    assert candidates == [manifest_path]


def test_load_packages_preserves_order(root: Path) -> None:
    """Records are produced in the order manifests are supplied."""
    second = write_package(root, "second", name="second")
    first = write_package(root, "first", name="first")

    packages = load_packages([second, first])

    assert [package.name for package in packages] == ["second", "first"]
