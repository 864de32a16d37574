"""Report the workspace members that depend on a package."""

from __future__ import annotations

import typing as typ

from ballast.utils import normalise_workspace_root

from ._shared import describe_packages, package_label, relative_location

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ballast.workspace import DependencyReport, PackageRecord


def run(
    workspace_root: Path | str,
    package_name: str,
    report: DependencyReport | None = None,
) -> str:
    """Describe ``package_name`` and every member declaring it."""
    root_path = normalise_workspace_root(workspace_root)
    if report is None:
        from ballast.workspace import find_references

        report = find_references(root_path, package_name)
    header = (
        f"{package_label(report.dependency)}  "
        f"{relative_location(report.dependency, root_path)}"
    )
    if not report.dependents:
        return f"{header}\nNo workspace packages depend on {package_name}."
    lines = [
        header,
        f"Depended on by {describe_packages(len(report.dependents))}:",
    ]
    lines.extend(
        f"- {package_label(package)} ({_range_label(package, package_name)})"
        for package in report.dependents
    )
    return "\n".join(lines)


def _range_label(package: PackageRecord, package_name: str) -> str:
    """Return the declared range for display, ``-`` when it is ``null``."""
    declared = package.declared_range(package_name)
    return "-" if declared is None else declared
