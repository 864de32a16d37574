"""Reverse-dependency and version queries over a workspace snapshot."""

from __future__ import annotations

import typing as typ

from .models import DependencyReport, PackageRecord, Workspace, WorkspaceError
from .scanner import search_workspaces

if typ.TYPE_CHECKING:
    from pathlib import Path


class PackageNotFoundError(WorkspaceError):
    """Raised when no workspace member carries the requested name."""

    def __init__(self, package_name: str) -> None:
        """Report the package name that could not be resolved."""
        self.package_name = package_name
        super().__init__(f"Could not find package {package_name!r}")


def find_package(workspace: Workspace, package_name: str) -> PackageRecord:
    """Return the first package in ``workspace`` named ``package_name``."""
    for package in workspace.packages:
        if package.name is not None and package.name == package_name:
            return package
    raise PackageNotFoundError(package_name)


def find_dependents(
    workspace: Workspace, package_name: str
) -> tuple[PackageRecord, ...]:
    """Return packages declaring ``package_name`` as a dependency.

    Only the presence of the key matters; declared ranges such as ``*`` or
    ``workspace:*`` are not inspected.
    """
    return tuple(
        package for package in workspace.packages if package.depends_on(package_name)
    )


def find_references(
    workspace_root: Path | str | None, package_name: str
) -> DependencyReport:
    """Scan ``workspace_root`` and report the dependents of ``package_name``."""
    workspace = search_workspaces(workspace_root)
    dependency = find_package(workspace, package_name)
    return DependencyReport(
        dependency=dependency,
        dependents=find_dependents(workspace, package_name),
    )


def versions(workspace: Workspace) -> dict[str, str | None]:
    """Map package names to versions; later duplicates replace earlier ones."""
    return {
        package.name: package.version
        for package in workspace.packages
        if package.name is not None
    }
