"""Command lines for re-invoking the generator from a build step.

The orchestration layer owns the location of the tool; it passes it in
explicitly (for example ``[sys.executable, "-m", "resbundle"]`` or the path
of an installed ``resbundle`` script) and gets back the argv of a
``generate`` call reproducing the given options.
"""

from __future__ import annotations

from typing import Sequence

from .bundle import BundleOptions
from .templates import DEFAULT_RETENTION
from .utils.io import DEFAULT_MAX_RESOURCE_SIZE

__all__ = ["build_command"]


def build_command(tool: Sequence[str], options: BundleOptions) -> list[str]:
    if not tool:
        raise ValueError("tool command must not be empty")
    if options.locations:
        # The command line has a single --base-dir for every resource.
        raise ValueError(
            "resources with individual locations cannot be passed on the "
            "command line; list them in a configuration file instead"
        )
    argv = [*tool, "generate", "--output", str(options.output_path)]
    if options.prefix:
        argv += ["--prefix", options.prefix]
    if options.suffix:
        argv += ["--suffix", options.suffix]
    if not options.null_terminate:
        argv.append("--no-null-terminate")
    if options.retention != DEFAULT_RETENTION:
        argv += ["--retention", options.retention]
    if options.header_path is not None:
        argv += ["--header", str(options.header_path)]
    if options.manifest_path is not None:
        argv += ["--emit-manifest", str(options.manifest_path)]
    if options.base_dir is not None:
        argv += ["--base-dir", str(options.base_dir)]
    if options.jobs != 1:
        argv += ["--jobs", str(options.jobs)]
    if options.max_resource_size != DEFAULT_MAX_RESOURCE_SIZE:
        # 0 on the command line lifts the limit.
        argv += ["--max-size", str(options.max_resource_size or 0)]
    if options.dry_run:
        argv.append("--dry-run")
    # "--" keeps resources starting with a dash from being read as options.
    argv += ["--", *(str(r) for r in options.resources)]
    return argv
