"""Filesystem helpers used across :mod:`ballast`."""

from __future__ import annotations

import os
from pathlib import Path

from plumbum import local


def normalise_workspace_root(value: Path | str | None) -> Path:
    """Return an absolute workspace path with ``~`` expanded.

    Symlinks are kept as given; only ``.`` and ``..`` segments are collapsed.
    """
    if value is None:
        return Path.cwd()
    candidate = local.path(str(value))
    expanded = Path(str(candidate)).expanduser()
    return Path(os.path.abspath(expanded))


def resolve_member_path(workspace_root: Path, relative: str) -> Path:
    """Return ``relative`` as an absolute path anchored at ``workspace_root``.

    The matched location is preserved even when it is a symlink.
    """
    return Path(os.path.abspath(workspace_root / relative))
