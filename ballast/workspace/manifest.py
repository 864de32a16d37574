"""Reading ``package.json`` manifests into :class:`PackageRecord` values."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec

from .models import (
    MANIFEST_FILENAME,
    PackageRecord,
    WorkspaceError,
    WorkspaceParseError,
)


class ManifestNotFoundError(WorkspaceError):
    """Raised when a package directory does not contain a manifest."""

    def __init__(self, manifest_path: Path) -> None:
        """Report the manifest path that could not be found."""
        self.path = manifest_path
        super().__init__(f"manifest not found: {manifest_path}")


class ManifestParseError(WorkspaceParseError):
    """Raised when a ``package.json`` cannot be decoded."""


class _PackageJson(msgspec.Struct, kw_only=True):
    """Subset of ``package.json`` fields consumed by :mod:`ballast`."""

    name: str | None = None
    version: str | None = None
    dependencies: dict[str, typ.Any] | None = None
    dev_dependencies: dict[str, typ.Any] | None = msgspec.field(
        default=None, name="devDependencies"
    )


_DECODER: typ.Final = msgspec.json.Decoder(_PackageJson)


def read_manifest(directory: Path | str) -> PackageRecord:
    """Load the manifest stored in the package ``directory``."""
    return load_manifest(Path(directory) / MANIFEST_FILENAME)


def load_manifest(manifest_path: Path | str) -> PackageRecord:
    """Decode the ``package.json`` at ``manifest_path``."""
    path = Path(manifest_path)
    try:
        payload = path.read_bytes()
    except FileNotFoundError as exc:
        raise ManifestNotFoundError(path) from exc
    try:
        document = _DECODER.decode(payload)
    except msgspec.DecodeError as exc:
        raise ManifestParseError(path, str(exc)) from exc
    return PackageRecord(
        manifest_path=path,
        root_path=path.parent,
        name=document.name,
        version=document.version,
        dependencies=document.dependencies or {},
        dev_dependencies=document.dev_dependencies or {},
    )
