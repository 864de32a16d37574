"""Subcommand implementations for the :mod:`ballast` CLI."""

from __future__ import annotations

from . import dependents, install, versions, workspaces

__all__ = ["dependents", "install", "versions", "workspaces"]
