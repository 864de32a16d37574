"""Workspace records and query results for :mod:`ballast`."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec

PNPM_WORKSPACE_FILE: typ.Final[str] = "pnpm-workspace.yaml"
MANIFEST_FILENAME: typ.Final[str] = "package.json"


class WorkspaceError(RuntimeError):
    """Base class for failures raised while inspecting a workspace."""


class WorkspaceParseError(WorkspaceError):
    """Raised when a workspace file exists but its contents are malformed."""

    def __init__(self, path: Path, detail: str) -> None:
        """Record the offending ``path`` alongside the parse ``detail``."""
        self.path = path
        super().__init__(f"failed to parse {path}: {detail}")


class WorkspaceManifest(msgspec.Struct, frozen=True, kw_only=True):
    """Represents the parsed ``pnpm-workspace.yaml`` document."""

    path: Path
    packages: tuple[str, ...]


class PackageRecord(msgspec.Struct, frozen=True, kw_only=True):
    """Represents a single ``package.json`` discovered in the workspace.

    ``name`` and ``version`` are optional because malformed manifests still
    take part in discovery; lookups treat a missing name as a non-match.
    """

    manifest_path: Path
    root_path: Path
    name: str | None = None
    version: str | None = None
    dependencies: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    dev_dependencies: dict[str, typ.Any] = msgspec.field(default_factory=dict)

    def depends_on(self, package_name: str) -> bool:
        """Return ``True`` when ``package_name`` is a runtime or dev dependency."""
        return (
            package_name in self.dependencies or package_name in self.dev_dependencies
        )

    def declared_range(self, package_name: str) -> str | None:
        """Return the range declared for ``package_name``, preferring runtime."""
        for table in (self.dependencies, self.dev_dependencies):
            if package_name in table:
                value = table[package_name]
                if value is None or isinstance(value, str):
                    return value
                return str(value)
        return None


class Workspace(msgspec.Struct, frozen=True, kw_only=True):
    """Represents the ordered set of packages discovered in a workspace."""

    workspace_root: Path
    packages: tuple[PackageRecord, ...]

    @property
    def package_names(self) -> tuple[str, ...]:
        """Return the names of packages that declare one, in workspace order."""
        return tuple(
            package.name for package in self.packages if package.name is not None
        )


class DependencyReport(msgspec.Struct, frozen=True, kw_only=True):
    """Result of a reverse-dependency query."""

    dependency: PackageRecord
    dependents: tuple[PackageRecord, ...] = ()

    @property
    def dependent_names(self) -> tuple[str | None, ...]:
        """Return the names of the dependent packages in workspace order."""
        return tuple(package.name for package in self.dependents)
