"""Workspace discovery utilities for :mod:`ballast`."""

from __future__ import annotations

from .installer import (
    InstallError,
    InstallFailedError,
    InstallProcessError,
    InstallResult,
    LoggingSink,
    OutputSink,
    PnpmExecutableNotFoundError,
    install,
)
from .manifest import (
    ManifestNotFoundError,
    ManifestParseError,
    load_manifest,
    read_manifest,
)
from .models import (
    MANIFEST_FILENAME,
    PNPM_WORKSPACE_FILE,
    DependencyReport,
    PackageRecord,
    Workspace,
    WorkspaceError,
    WorkspaceManifest,
    WorkspaceParseError,
)
from .queries import (
    PackageNotFoundError,
    find_dependents,
    find_package,
    find_references,
    versions,
)
from .scanner import (
    WorkspaceConfigNotFoundError,
    WorkspaceConfigParseError,
    expand_patterns,
    load_packages,
    load_workspace_manifest,
    manifest_candidates,
    search_workspaces,
)

__all__ = [
    "MANIFEST_FILENAME",
    "PNPM_WORKSPACE_FILE",
    "DependencyReport",
    "InstallError",
    "InstallFailedError",
    "InstallProcessError",
    "InstallResult",
    "LoggingSink",
    "ManifestNotFoundError",
    "ManifestParseError",
    "OutputSink",
    "PackageNotFoundError",
    "PackageRecord",
    "PnpmExecutableNotFoundError",
    "Workspace",
    "WorkspaceConfigNotFoundError",
    "WorkspaceConfigParseError",
    "WorkspaceError",
    "WorkspaceManifest",
    "WorkspaceParseError",
    "expand_patterns",
    "find_dependents",
    "find_package",
    "find_references",
    "install",
    "load_manifest",
    "load_packages",
    "load_workspace_manifest",
    "manifest_candidates",
    "read_manifest",
    "search_workspaces",
    "versions",
]
