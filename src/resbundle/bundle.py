# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Bundle composition: ordered resources in, one C source file out.

A :class:`BundleComposer` serves exactly one generation run and moves through
``IDLE -> COLLECTING -> DONE`` (or ``FAILED``). Identifiers are derived and
checked for collisions before any file is read; files are then read in list
order (optionally on a thread pool, reassembled in order), encoded, and
emitted. All outputs of the run are written in a single transaction, so a
failed run never leaves a partial bundle behind.
"""

from __future__ import annotations

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path, PurePath
from typing import Iterable, Mapping, Sequence

from ._version import __version__ as TOOL_VERSION
from .emitter import (
    emit_declarations,
    emit_extern_declarations,
    select_preamble,
)
from .encoding import EncodedLiteral, encode_bytes
from .errors import (
    E_IDENT_COLLISION,
    E_INPUT_NOT_FOUND,
    IdentifierCollisionError,
    config_error,
    input_error,
)
from .identifiers import derive_identifier
from .logging import get_logger
from .manifest import render_manifest
from .reporting import get_reporter, task
from .templates import DEFAULT_RETENTION, TEMPLATE_HEADER
from .utils.io import (
    DEFAULT_MAX_RESOURCE_SIZE,
    read_resource,
    transactional_write_files,
)
from .utils.paths import resolve_resource

__all__ = [
    "BundleOptions",
    "ResourceFile",
    "BundleEntry",
    "BundleOutput",
    "BundleResult",
    "PlanEntry",
    "ComposerState",
    "BundleComposer",
    "assign_identifiers",
    "generate_bundle",
    "plan_bundle",
    "render_header",
]


class ComposerState(Enum):
    IDLE = auto()
    COLLECTING = auto()
    DONE = auto()
    FAILED = auto()


@dataclass(slots=True)
class BundleOptions:
    resources: Sequence[str | PurePath]
    output_path: Path
    prefix: str = ""
    suffix: str = ""
    # Text resources are usable as C strings by default.
    null_terminate: bool = True
    retention: str = DEFAULT_RETENTION
    header_path: Path | None = None
    manifest_path: Path | None = None
    # Directory relative resources are read from; identifiers still use the
    # path exactly as listed.
    base_dir: Path | None = None
    jobs: int = 1
    dry_run: bool = False
    max_resource_size: int | None = DEFAULT_MAX_RESOURCE_SIZE
    # On-disk location of listed entries that are not read from base_dir,
    # such as resources listed in a configuration file.
    locations: Mapping[str, Path] = field(default_factory=dict)

    def locate(self, resource: str) -> Path:
        found = self.locations.get(resource)
        if found is not None:
            return found
        return resolve_resource(self.base_dir, resource)


@dataclass(frozen=True, slots=True)
class ResourceFile:
    path: str
    data: bytes


@dataclass(frozen=True, slots=True)
class BundleEntry:
    resource: ResourceFile
    identifier: str
    literal: EncodedLiteral
    declarations: str

    @property
    def size(self) -> int:
        return self.literal.size

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.resource.data).hexdigest()


@dataclass(slots=True)
class BundleOutput:
    preamble: str
    entries: list[BundleEntry] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.preamble + "".join(e.declarations for e in self.entries)

    @property
    def identifiers(self) -> list[str]:
        return [e.identifier for e in self.entries]

    @property
    def total_bytes(self) -> int:
        return sum(e.size for e in self.entries)


@dataclass(slots=True)
class BundleResult:
    output_path: Path
    output: BundleOutput
    changed: list[Path]
    dry_run: bool = False

    @property
    def entries(self) -> list[BundleEntry]:
        return self.output.entries


@dataclass(frozen=True, slots=True)
class PlanEntry:
    path: str
    identifier: str
    size: int


def assign_identifiers(
    paths: Iterable[str], prefix: str = "", suffix: str = ""
) -> list[str]:
    """Derive one identifier per path, rejecting duplicates.

    :raises IdentifierCollisionError: naming both conflicting paths.
    """
    seen: dict[str, str] = {}
    out: list[str] = []
    for path in paths:
        ident = derive_identifier(path, prefix, suffix)
        previous = seen.get(ident)
        if previous is not None:
            what = (
                f"'{path}' is listed more than once"
                if previous == path
                else f"'{previous}' and '{path}' both map to {ident}"
            )
            raise IdentifierCollisionError(
                code=E_IDENT_COLLISION,
                message=f"Identifier collision: {what}",
                context={"identifier": ident, "paths": [previous, path]},
            )
        seen[ident] = path
        out.append(ident)
    return out


def _validate_options(options: BundleOptions) -> str:
    if options.jobs < 1:
        raise config_error(f"jobs must be >= 1, got {options.jobs}")
    limit = options.max_resource_size
    if limit is not None and limit < 0:
        raise config_error(f"max resource size must be >= 0, got {limit}")
    for name in ("prefix", "suffix"):
        if not isinstance(getattr(options, name), str):
            raise config_error(f"{name} must be a string")
    return select_preamble(options.retention)


def render_header(
    output: BundleOutput, header_path: Path, bundle_path: Path
) -> str:
    guard = derive_identifier(header_path.name)
    return TEMPLATE_HEADER.format(
        tool_ver=TOOL_VERSION,
        bundle=bundle_path.name,
        guard=guard,
        declarations=emit_extern_declarations(output.identifiers),
    )


class BundleComposer:
    """Drives one generation run from an ordered resource list."""

    def __init__(self, options: BundleOptions):
        self.options = options
        self.state = ComposerState.IDLE

    # Collection ---------------------------------------------------------------
    def _read_all(self, names: list[str]) -> list[bytes]:
        opts = self.options
        rep = get_reporter()
        paths = [opts.locate(n) for n in names]

        def _read(p: Path) -> bytes:
            return read_resource(p, opts.max_resource_size)

        blobs: list[bytes] = []
        if opts.jobs > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=opts.jobs) as pool:
                # map() yields in submission order and re-raises the first
                # failure in that order.
                for name, data in zip(names, pool.map(_read, paths)):
                    blobs.append(data)
                    rep.advance("bundle.collect", current_item=name)
        else:
            for name, p in zip(names, paths):
                blobs.append(_read(p))
                rep.advance("bundle.collect", current_item=name)
        return blobs

    def collect(self) -> BundleOutput:
        """Read, encode and emit every resource in list order."""
        if self.state is not ComposerState.IDLE:
            raise RuntimeError(
                f"BundleComposer serves a single run (state={self.state.name})"
            )
        self.state = ComposerState.COLLECTING
        logger = get_logger()
        opts = self.options
        try:
            preamble = _validate_options(opts)
            names = [str(r) for r in opts.resources]
            idents = assign_identifiers(names, opts.prefix, opts.suffix)
            output = BundleOutput(preamble=preamble)
            with task(
                "bundle.collect", "Collect resources", total=len(names)
            ) as final:
                blobs = self._read_all(names)
                for name, ident, data in zip(names, idents, blobs):
                    literal = encode_bytes(data, opts.null_terminate)
                    if literal.element_count == 0:
                        logger.warning(
                            "Resource '%s' is empty; %s has an empty "
                            "initializer, which needs compiler support",
                            name,
                            ident,
                        )
                    logger.debug(
                        "%s -> %s (%d bytes)", name, ident, literal.size
                    )
                    output.entries.append(
                        BundleEntry(
                            resource=ResourceFile(path=name, data=data),
                            identifier=ident,
                            literal=literal,
                            declarations=emit_declarations(ident, literal),
                        )
                    )
                final["files"] = len(output.entries)
                final["bytes"] = output.total_bytes
        except BaseException:
            self.state = ComposerState.FAILED
            raise
        return output

    # Output -------------------------------------------------------------------
    def _render_files(self, output: BundleOutput) -> dict[Path, str]:
        opts = self.options
        files: dict[Path, str] = {opts.output_path: output.text}
        if opts.header_path is not None:
            files[opts.header_path] = render_header(
                output, opts.header_path, opts.output_path
            )
        if opts.manifest_path is not None:
            files[opts.manifest_path] = render_manifest(
                output,
                bundle_text=output.text,
                bundle_path=opts.output_path,
                null_terminate=opts.null_terminate,
                retention=opts.retention,
                prefix=opts.prefix,
                suffix=opts.suffix,
            )
        return files

    def run(self) -> BundleResult:
        output = self.collect()
        opts = self.options
        rep = get_reporter()
        try:
            files = self._render_files(output)
            if opts.dry_run:
                rep.status("[DRY RUN] Planned outputs:")
                for path in files:
                    rep.status(f"    {path}")
                changed: list[Path] = []
            else:
                with task("bundle.write", "Write outputs") as final:
                    changed = transactional_write_files(files)
                    final["files"] = len(changed)
        except BaseException:
            self.state = ComposerState.FAILED
            raise
        self.state = ComposerState.DONE
        if not opts.dry_run and not changed:
            rep.status(f"{opts.output_path.name} is up to date")
        rep.status(
            "Bundle summary: "
            + f"output={opts.output_path.name} resources={len(output.entries)} "
            + f"bytes={output.total_bytes} changed={len(changed)} "
            + f"dry_run={str(opts.dry_run).lower()}"
        )
        return BundleResult(
            output_path=opts.output_path,
            output=output,
            changed=changed,
            dry_run=opts.dry_run,
        )


def generate_bundle(options: BundleOptions) -> BundleResult:
    """Generate a resource bundle; each call is an independent run."""
    return BundleComposer(options).run()


def plan_bundle(options: BundleOptions) -> list[PlanEntry]:
    """Resolve identifiers and sizes without reading file contents."""
    _validate_options(options)
    names = [str(r) for r in options.resources]
    idents = assign_identifiers(names, options.prefix, options.suffix)
    plan: list[PlanEntry] = []
    for name, ident in zip(names, idents):
        p = options.locate(name)
        if not p.is_file():
            raise input_error(E_INPUT_NOT_FOUND, p, f"File not found: {p}")
        plan.append(
            PlanEntry(path=name, identifier=ident, size=os.stat(p).st_size)
        )
    rep = get_reporter()
    rep.status(
        "Plan summary: "
        + f"resources={len(plan)} bytes={sum(e.size for e in plan)}"
    )
    return plan
