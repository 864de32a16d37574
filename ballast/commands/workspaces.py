"""List the members of a pnpm workspace."""

from __future__ import annotations

import typing as typ

from ballast.utils import normalise_workspace_root

from ._shared import describe_packages, package_label, relative_location

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ballast.workspace import Workspace


def run(workspace_root: Path | str, workspace: Workspace | None = None) -> str:
    """Return one line per workspace member followed by a summary."""
    root_path = normalise_workspace_root(workspace_root)
    if workspace is None:
        from ballast.workspace import search_workspaces

        workspace = search_workspaces(root_path)
    lines = [
        f"{package_label(package)}  {relative_location(package, root_path)}"
        for package in workspace.packages
    ]
    lines.append(f"Found {describe_packages(len(workspace.packages))} in {root_path}")
    return "\n".join(lines)
