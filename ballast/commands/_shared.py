"""Shared formatting helpers for command implementations."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ballast.workspace import PackageRecord

UNNAMED_PACKAGE: typ.Final[str] = "<unnamed>"


def describe_packages(count: int) -> str:
    """Return a human-friendly package count summary."""
    label = "package" if count == 1 else "packages"
    return f"{count} {label}"


def package_label(package: PackageRecord) -> str:
    """Return ``name@version`` for ``package`` with placeholders for gaps."""
    name = package.name or UNNAMED_PACKAGE
    if package.version is None:
        return name
    return f"{name}@{package.version}"


def relative_location(package: PackageRecord, workspace_root: Path) -> str:
    """Return the package directory relative to ``workspace_root`` when possible."""
    try:
        return package.root_path.relative_to(workspace_root).as_posix()
    except ValueError:
        return str(package.root_path)
