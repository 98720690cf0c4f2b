"""IO helpers: resource reads and transactional output writes."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Mapping

from ..errors import (
    E_INPUT_NOT_FOUND,
    E_INPUT_READ,
    E_INPUT_TOO_LARGE,
    E_WRITE_IO,
    OutputWriteError,
    input_error,
)

__all__ = [
    "DEFAULT_MAX_RESOURCE_SIZE",
    "read_resource",
    "transactional_write_files",
]

DEFAULT_MAX_RESOURCE_SIZE = 256 * 1024 * 1024

_TMP_SUFFIX = ".tmp.tx"
_BAK_SUFFIX = ".bak.tx"


def read_resource(
    path: Path, max_size: int | None = DEFAULT_MAX_RESOURCE_SIZE
) -> bytes:
    """Read the full content of one listed resource.

    :raises InputError: when the file is missing, is not a regular file,
        exceeds ``max_size`` or cannot be read completely.
    """
    if not path.exists():
        raise input_error(E_INPUT_NOT_FOUND, path, f"File not found: {path}")
    if not path.is_file():
        raise input_error(E_INPUT_READ, path, f"Not a regular file: {path}")
    try:
        expected = path.stat().st_size
        if max_size is not None and expected > max_size:
            raise input_error(
                E_INPUT_TOO_LARGE,
                path,
                f"File too large: {path} ({expected}>{max_size} bytes)",
                size=expected,
            )
        data = path.read_bytes()
    except OSError as e:
        raise input_error(
            E_INPUT_READ, path, f"Cannot read {path}: {e.strerror or e}"
        ) from e
    if len(data) < expected:
        raise input_error(
            E_INPUT_READ,
            path,
            f"Short read on {path}: got {len(data)} of {expected} bytes",
        )
    return data


def _write_text(path: Path, content: str) -> None:
    # Fixed newlines keep generated bytes identical across platforms.
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)


def _same_content(path: Path, content: str) -> bool:
    if not path.is_file():
        return False
    try:
        return path.read_bytes() == content.encode("utf-8")
    except OSError:
        return False


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def transactional_write_files(files: Mapping[Path, str]) -> list[Path]:
    """Write several outputs so that either all or none are replaced.

    Each content is staged in a temporary file next to its target. Targets
    whose content is unchanged are left untouched. Changed targets are
    backed up and replaced with ``os.replace``; a failure restores every
    replaced target from its backup and removes newly created ones.

    :returns: The targets whose content changed.
    :raises OutputWriteError: if staging or replacing fails.
    """
    staged: list[tuple[Path, Path]] = []
    replaced: list[Path] = []
    backups: dict[Path, Path] = {}
    created: set[Path] = set()
    failed_target: Path | None = None
    try:
        for target, content in files.items():
            if _same_content(target, content):
                continue
            failed_target = target
            tmp = target.with_name(target.name + _TMP_SUFFIX)
            _write_text(tmp, content)
            staged.append((target, tmp))

        for target, tmp in staged:
            failed_target = target
            if target.exists():
                bak = target.with_name(target.name + _BAK_SUFFIX)
                shutil.copyfile(target, bak)
                backups[target] = bak
            else:
                created.add(target)
            os.replace(tmp, target)
            replaced.append(target)
    except OSError as e:
        for target in replaced:
            bak = backups.get(target)
            try:
                if bak is not None:
                    os.replace(bak, target)
                elif target in created:
                    _remove_quietly(target)
            except OSError:
                pass
        for _, tmp in staged:
            try:
                _remove_quietly(tmp)
            except OSError:
                pass
        for bak in backups.values():
            try:
                _remove_quietly(bak)
            except OSError:
                pass
        raise OutputWriteError(
            code=E_WRITE_IO,
            message=f"Cannot write {failed_target}: {e.strerror or e}",
            context={"path": str(failed_target)},
        ) from e

    for bak in backups.values():
        try:
            _remove_quietly(bak)
        except OSError:
            pass
    return replaced
