"""Report package versions across a pnpm workspace."""

from __future__ import annotations

import typing as typ

import msgspec

from ballast.utils import normalise_workspace_root

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ballast.workspace import Workspace


def run(
    workspace_root: Path | str,
    *,
    as_json: bool = False,
    workspace: Workspace | None = None,
) -> str:
    """Return the ``name version`` table, or a JSON object when ``as_json``."""
    from ballast.workspace import versions

    if workspace is None:
        from ballast.workspace import search_workspaces

        workspace = search_workspaces(normalise_workspace_root(workspace_root))
    mapping = versions(workspace)
    if as_json:
        return msgspec.json.encode(mapping, order="sorted").decode("utf-8")
    if not mapping:
        return "No named packages found."
    width = max(len(name) for name in mapping)
    return "\n".join(
        f"{name.ljust(width)}  {version or '-'}"
        for name, version in sorted(mapping.items())
    )
