"""Bundle configuration loading (YAML/JSON) and input-list files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import config_error
from .templates import RETENTION_PREAMBLES

__all__ = ["BundleConfig", "load_config", "read_input_list"]


@dataclass(slots=True)
class BundleConfig:
    """Settings read from a bundle configuration file.

    ``None`` means "not set", so command-line flags and library defaults
    can fill the gap. Paths are already resolved against the configuration
    file's directory. ``resource_root`` is where the listed ``resources``
    are read from; it does not apply to resources given elsewhere.
    """

    resources: list[str] = field(default_factory=list)
    resource_root: Path | None = None
    output: Path | None = None
    header: Path | None = None
    manifest: Path | None = None
    base_dir: Path | None = None
    prefix: str | None = None
    suffix: str | None = None
    null_terminate: bool | None = None
    retention: str | None = None
    jobs: int | None = None


_PATH_KEYS = {"output", "header", "manifest", "base_dir"}
_STR_KEYS = {"prefix", "suffix", "retention"}
_KNOWN_KEYS = {f.name for f in fields(BundleConfig)} - {"resource_root"}


def _parse(text: str, path: Path) -> Any:
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise config_error(
            f"Cannot parse configuration {path}: {e}", {"path": str(path)}
        ) from e


def load_config(path: str | Path) -> BundleConfig:
    p = Path(path)
    if not p.is_file():
        raise config_error(
            f"Configuration file not found: {p}", {"path": str(p)}
        )
    data = _parse(p.read_text(encoding="utf-8"), p)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise config_error("Root of configuration must be a mapping")
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise config_error(
            f"Unknown configuration keys: {', '.join(unknown)}",
            {"path": str(p), "keys": unknown},
        )

    root = p.parent
    cfg = BundleConfig()
    resources = data.get("resources", [])
    if not isinstance(resources, list) or not all(
        isinstance(r, str) for r in resources
    ):
        raise config_error("'resources' must be a list of paths")
    cfg.resources = list(resources)
    for key in _PATH_KEYS & data.keys():
        value = data[key]
        if value is None:
            continue
        if not isinstance(value, str):
            raise config_error(f"'{key}' must be a path string")
        setattr(cfg, key, root / value)
    for key in _STR_KEYS & data.keys():
        value = data[key]
        if value is None:
            continue
        if not isinstance(value, str):
            raise config_error(f"'{key}' must be a string")
        setattr(cfg, key, value)
    if cfg.retention is not None and cfg.retention not in RETENTION_PREAMBLES:
        raise config_error(
            f"Unknown retention target '{cfg.retention}'",
            {"choices": sorted(RETENTION_PREAMBLES)},
        )
    if data.get("null_terminate") is not None:
        if not isinstance(data["null_terminate"], bool):
            raise config_error("'null_terminate' must be a boolean")
        cfg.null_terminate = data["null_terminate"]
    if data.get("jobs") is not None:
        jobs = data["jobs"]
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
            raise config_error("'jobs' must be a positive integer")
        cfg.jobs = jobs
    # Listed resources are relative to the config file unless base_dir says
    # otherwise.
    if cfg.resources:
        cfg.resource_root = cfg.base_dir if cfg.base_dir is not None else root
    return cfg


def read_input_list(path: str | Path) -> list[str]:
    """Read a staged resource list: one path per line, blanks ignored.

    Entries are kept verbatim apart from the line terminator; resource
    names may start or end with spaces.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise config_error(
            f"Cannot read input list {p}: {e.strerror or e}", {"path": str(p)}
        ) from e
    return [line for line in text.splitlines() if line.strip()]
