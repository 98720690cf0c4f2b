"""Path utilities for resource resolution."""

from __future__ import annotations
from pathlib import Path, PurePath

__all__ = ["resolve_resource"]


def resolve_resource(base_dir: Path | None, resource: str | PurePath) -> Path:
    """Locate a listed resource on disk.

    Relative entries are read from ``base_dir`` (the current directory when
    unset); the identifier is still derived from the entry as listed.
    """
    p = Path(resource)
    if p.is_absolute() or base_dir is None:
        return p
    return base_dir / p
