"""Utility helpers for the :mod:`ballast` package."""

from __future__ import annotations

from .path import normalise_workspace_root, resolve_member_path

__all__ = ["normalise_workspace_root", "resolve_member_path"]
