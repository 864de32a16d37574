"""Discovery of pnpm workspace members.

Discovery runs as a pipeline of independent stages: the workspace
configuration is parsed into glob patterns, the patterns are expanded into
member directories, directories without a ``package.json`` are dropped, and
the remaining manifests are loaded in order.
"""

from __future__ import annotations

import glob
import logging
from collections import abc as cabc
from pathlib import Path

import yaml

from ballast.utils import normalise_workspace_root, resolve_member_path

from .manifest import load_manifest
from .models import (
    MANIFEST_FILENAME,
    PNPM_WORKSPACE_FILE,
    PackageRecord,
    Workspace,
    WorkspaceError,
    WorkspaceManifest,
    WorkspaceParseError,
)

LOGGER = logging.getLogger(__name__)


class WorkspaceConfigNotFoundError(WorkspaceError):
    """Raised when ``pnpm-workspace.yaml`` is missing from the workspace root."""

    def __init__(self, workspace_root: Path) -> None:
        """Report the directory that lacks a workspace configuration."""
        self.workspace_root = workspace_root
        super().__init__(
            f"Could not find {PNPM_WORKSPACE_FILE} at {str(workspace_root)!r}"
        )


class WorkspaceConfigParseError(WorkspaceParseError):
    """Raised when ``pnpm-workspace.yaml`` cannot be interpreted."""

    @classmethod
    def invalid_yaml(
        cls, path: Path, exc: yaml.YAMLError
    ) -> WorkspaceConfigParseError:
        """Return an error describing malformed YAML."""
        return cls(path, f"invalid YAML ({exc})")

    @classmethod
    def undecodable(
        cls, path: Path, exc: UnicodeDecodeError
    ) -> WorkspaceConfigParseError:
        """Return an error describing bytes that are not UTF-8 text."""
        return cls(path, f"not valid UTF-8 ({exc})")

    @classmethod
    def non_mapping_document(cls, path: Path) -> WorkspaceConfigParseError:
        """Return an error indicating the document root is not a mapping."""
        return cls(path, "document root must be a mapping")

    @classmethod
    def missing_packages(cls, path: Path) -> WorkspaceConfigParseError:
        """Return an error indicating the ``packages`` field is absent."""
        return cls(path, "missing 'packages' field")

    @classmethod
    def invalid_packages(cls, path: Path, detail: str) -> WorkspaceConfigParseError:
        """Return an error describing an unusable ``packages`` value."""
        return cls(path, detail)


def load_workspace_manifest(workspace_root: Path | str) -> WorkspaceManifest:
    """Parse ``pnpm-workspace.yaml`` beneath ``workspace_root``."""
    root_path = normalise_workspace_root(workspace_root)
    config_path = root_path / PNPM_WORKSPACE_FILE
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise WorkspaceConfigNotFoundError(root_path) from exc
    except UnicodeDecodeError as exc:
        raise WorkspaceConfigParseError.undecodable(config_path, exc) from exc
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigParseError.invalid_yaml(config_path, exc) from exc
    if not isinstance(document, cabc.Mapping):
        raise WorkspaceConfigParseError.non_mapping_document(config_path)
    if "packages" not in document:
        raise WorkspaceConfigParseError.missing_packages(config_path)
    patterns = _expect_patterns(document["packages"], config_path)
    return WorkspaceManifest(path=config_path, packages=patterns)


def _expect_patterns(value: object, config_path: Path) -> tuple[str, ...]:
    """Return ``value`` as a tuple of glob patterns or raise."""
    if not isinstance(value, list):
        detail = f"'packages' must be a list; received {type(value).__name__}"
        raise WorkspaceConfigParseError.invalid_packages(config_path, detail)
    for index, entry in enumerate(value):
        if not isinstance(entry, str):
            detail = (
                f"packages[{index}] must be a string; received {type(entry).__name__}"
            )
            raise WorkspaceConfigParseError.invalid_packages(config_path, detail)
    return tuple(value)


def expand_patterns(workspace_root: Path, patterns: cabc.Iterable[str]) -> list[Path]:
    """Expand ``patterns`` into absolute member directories.

    Each pattern is expanded on its own and the matches are concatenated in
    pattern order. Matches within a pattern are sorted; duplicates produced by
    overlapping patterns are preserved.
    """
    directories: list[Path] = []
    for pattern in patterns:
        matches = sorted(
            glob.glob(pattern, root_dir=str(workspace_root), recursive=True)
        )
        LOGGER.debug("Pattern %r matched %d path(s)", pattern, len(matches))
        directories.extend(resolve_member_path(workspace_root, m) for m in matches)
    return directories


def manifest_candidates(directories: cabc.Iterable[Path]) -> list[Path]:
    """Return manifest paths for ``directories`` that contain ``package.json``."""
    candidates: list[Path] = []
    for directory in directories:
        manifest_path = directory / MANIFEST_FILENAME
        if manifest_path.is_file():
            candidates.append(manifest_path)
        else:
            LOGGER.debug("Skipping %s: no %s", directory, MANIFEST_FILENAME)
    return candidates


def load_packages(manifest_paths: cabc.Iterable[Path]) -> tuple[PackageRecord, ...]:
    """Load each manifest in ``manifest_paths`` preserving order."""
    return tuple(load_manifest(path) for path in manifest_paths)


def search_workspaces(workspace_root: Path | str | None = None) -> Workspace:
    """Return the :class:`Workspace` rooted at ``workspace_root``."""
    root_path = normalise_workspace_root(workspace_root)
    manifest = load_workspace_manifest(root_path)
    directories = expand_patterns(root_path, manifest.packages)
    packages = load_packages(manifest_candidates(directories))
    LOGGER.debug("Discovered %d package(s) in %s", len(packages), root_path)
    return Workspace(workspace_root=root_path, packages=packages)
