"""Run ``pnpm install`` for the workspace."""

from __future__ import annotations

import asyncio
import typing as typ

from ballast import config as config_module
from ballast.utils import normalise_workspace_root

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ballast.config import BallastConfig
    from ballast.workspace import OutputSink


def run(
    workspace_root: Path | str,
    *,
    fail_on_error: bool | None = None,
    configuration: BallastConfig | None = None,
    sink: OutputSink | None = None,
) -> str:
    """Install workspace dependencies and summarise the exit status.

    ``fail_on_error`` falls back to ``install.fail_on_error`` from the
    active configuration when not given explicitly.
    """
    from ballast.workspace import install

    root_path = normalise_workspace_root(workspace_root)
    if fail_on_error is None:
        if configuration is None:
            configuration = config_module.current_configuration()
        fail_on_error = configuration.install.fail_on_error
    result = asyncio.run(
        install(root_path, sink=sink, fail_on_error=fail_on_error)
    )
    if result.succeeded:
        return f"pnpm install completed in {root_path}"
    return f"pnpm install finished with exit code {result.exit_code} in {root_path}"
