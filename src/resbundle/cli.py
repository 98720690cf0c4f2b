# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Command line interface for resbundle.

The tool is typically invoked from a build step with the resolved resource
list and an output path::

    resbundle generate -o resources.c --header resources.h \\
        scripts/init.lua images/logo.png

Exit status is 0 on success and 1 when the run failed; the error message
names the offending file or path.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ._version import __version__
from .bundle import BundleOptions, generate_bundle, plan_bundle
from .config import BundleConfig, load_config, read_input_list
from .errors import BundleError, config_error
from .inspector import inspect_bundle, validate_bundle
from .logging import configure_logging, get_logger, section, step
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)
from .templates import DEFAULT_RETENTION, RETENTION_PREAMBLES
from .utils.io import DEFAULT_MAX_RESOURCE_SIZE
from .utils.paths import resolve_resource

_PLAN_PLACEHOLDER_OUTPUT = Path("resources.c")


def options_from_args(
    args: argparse.Namespace, *, require_output: bool = True
) -> BundleOptions:
    """Merge configuration file, input list and flags into options.

    Flags win over the configuration file. Resources are concatenated in
    the order config file, input list, positional arguments. Resources from
    the configuration file are read relative to it; the others relative to
    ``--base-dir`` or the current directory.
    """
    cfg = load_config(args.config) if args.config else BundleConfig()
    resources: list[str] = list(cfg.resources)
    locations = {
        r: resolve_resource(cfg.resource_root, r) for r in cfg.resources
    }
    if args.input_list is not None:
        resources += read_input_list(args.input_list)
    resources += list(args.resources)

    output = args.output or cfg.output
    if output is None:
        if require_output:
            raise config_error(
                "An output path is required (--output or 'output' in the "
                "configuration file)"
            )
        output = _PLAN_PLACEHOLDER_OUTPUT

    def pick(flag, configured, default):
        if flag is not None:
            return flag
        if configured is not None:
            return configured
        return default

    max_size = pick(args.max_size, None, DEFAULT_MAX_RESOURCE_SIZE)
    return BundleOptions(
        resources=resources,
        output_path=output,
        prefix=pick(args.prefix, cfg.prefix, ""),
        suffix=pick(args.suffix, cfg.suffix, ""),
        null_terminate=pick(args.null_terminate, cfg.null_terminate, True),
        retention=pick(args.retention, cfg.retention, DEFAULT_RETENTION),
        header_path=pick(getattr(args, "header", None), cfg.header, None),
        manifest_path=pick(
            getattr(args, "emit_manifest", None), cfg.manifest, None
        ),
        base_dir=pick(args.base_dir, cfg.base_dir, None),
        jobs=pick(args.jobs, cfg.jobs, 1),
        dry_run=bool(getattr(args, "dry_run", False)),
        max_resource_size=max_size or None,
        locations=locations,
    )


def _generate_cmd(args: argparse.Namespace) -> int:
    opts = options_from_args(args)
    with section("Generate resource bundle"):
        result = generate_bundle(opts)
    get_logger().info(
        "Generated %s (%d resources, %d bytes)",
        result.output_path.name,
        len(result.entries),
        result.output.total_bytes,
    )
    return 0


def _plan_cmd(args: argparse.Namespace) -> int:
    opts = options_from_args(args, require_output=False)
    plan = plan_bundle(opts)
    rep = get_reporter()
    rep.flush()
    if args.json:
        rows = [
            {"path": e.path, "identifier": e.identifier, "size": e.size}
            for e in plan
        ]
        print(json.dumps(rows, indent=2))
    else:
        for e in plan:
            rep.status(f"{e.identifier} <- {e.path} ({e.size} bytes)")
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    step(f"inspecting {args.bundle}")
    info = inspect_bundle(args.bundle)
    issues = validate_bundle(info)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(
            json.dumps({**info.to_dict(), "issues": issues}, indent=2)
        )
    else:
        for r in info.resources:
            rep.status(
                f"{r.identifier}: size={r.declared_size} "
                f"elements={r.element_count}"
            )
    for issue in issues:
        rep.warning(issue)
    total = sum(len(r.payload) for r in info.resources)
    rep.status(
        "Inspect summary: "
        + f"bundle={Path(args.bundle).name} resources={len(info.resources)} "
        + f"bytes={total} issues={len(issues)}"
    )
    return 1 if issues else 0


def _add_input_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "resources",
        nargs="*",
        help="Resource files in bundle order (paths as the symbols should "
        "be named)",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Bundle configuration file (YAML or JSON)",
    )
    p.add_argument(
        "--input-list",
        dest="input_list",
        type=Path,
        help="File listing resources, one path per line",
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Path of the generated C source file",
    )
    p.add_argument("--prefix", help="Identifier prefix for all symbols")
    p.add_argument("--suffix", help="Identifier suffix for all symbols")
    p.add_argument(
        "--null-terminate",
        dest="null_terminate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Append a zero byte after each resource, not counted in the "
        "size constant (default: on)",
    )
    p.add_argument(
        "--retention",
        choices=sorted(RETENTION_PREAMBLES),
        help=f"Symbol retention target (default: {DEFAULT_RETENTION})",
    )
    p.add_argument(
        "--base-dir",
        dest="base_dir",
        type=Path,
        help="Directory relative resource paths are read from",
    )
    p.add_argument(
        "-j",
        "--jobs",
        type=int,
        help="Read resources with this many threads (output order is "
        "unchanged)",
    )
    p.add_argument(
        "--max-size",
        dest="max_size",
        type=int,
        help="Largest accepted resource in bytes (0 disables the limit)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="resbundle",
        description="Embed resource files into a generated C source file",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"resbundle {__version__}",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL "
        "events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate a resource bundle")
    _add_input_args(g)
    g.add_argument(
        "--header",
        type=Path,
        help="Also write a header with extern declarations",
    )
    g.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Also write a JSON manifest of the bundled resources",
    )
    g.add_argument(
        "--dry-run",
        action="store_true",
        help="Read and encode resources without writing outputs",
    )
    g.set_defaults(func=_generate_cmd)

    pl = sub.add_parser(
        "plan", help="Show the symbols a bundle would declare"
    )
    _add_input_args(pl)
    pl.add_argument("--json", action="store_true", help="Emit JSON")
    pl.set_defaults(func=_plan_cmd)

    i = sub.add_parser("inspect", help="Decode and check a generated bundle")
    i.add_argument("bundle", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON")
    i.set_defaults(func=_inspect_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # Rich without a TTY falls back to plain.
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except BundleError as e:
        rep = get_reporter()
        rep.flush()
        rep.error(str(e))
        if e.context:
            get_logger().debug("error context: %s", e.context)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
