"""Manifest generation for resbundle.

The manifest is an optional JSON artifact describing a generated bundle:
which file became which symbol, how many bytes it holds, and content hashes
so a build can verify what was embedded. It is only produced on request and
is written in the same transaction as the bundle itself.
"""

from __future__ import annotations

from pathlib import Path
import hashlib
import json
from typing import TYPE_CHECKING, Any

from ._version import __version__ as TOOL_VERSION
from .identifiers import size_identifier

if TYPE_CHECKING:  # pragma: no cover
    from .bundle import BundleOutput

__all__ = ["manifest_dict", "render_manifest"]

MANIFEST_VERSION = 1


def manifest_dict(
    output: "BundleOutput",
    *,
    bundle_text: str,
    bundle_path: Path,
    null_terminate: bool,
    retention: str,
    prefix: str = "",
    suffix: str = "",
) -> dict[str, Any]:
    resources = [
        {
            "path": e.resource.path,
            "identifier": e.identifier,
            "size_identifier": size_identifier(e.identifier),
            "size": e.size,
            "sha256": e.sha256,
        }
        for e in output.entries
    ]
    return {
        "version": MANIFEST_VERSION,
        "tool_version": TOOL_VERSION,
        "bundle": bundle_path.name,
        "bundle_sha256": hashlib.sha256(
            bundle_text.encode("utf-8")
        ).hexdigest(),
        "options": {
            "null_terminate": null_terminate,
            "retention": retention,
            "prefix": prefix,
            "suffix": suffix,
        },
        "counts": {
            "resources": len(resources),
            "bytes": output.total_bytes,
        },
        "resources": resources,
    }


def render_manifest(output: "BundleOutput", **kwargs: Any) -> str:
    data = manifest_dict(output, **kwargs)
    return json.dumps(data, indent=2, sort_keys=True) + "\n"
