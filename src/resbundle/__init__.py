# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""resbundle package

Build-time resource compiler: turns an ordered list of files into one C
source file declaring, per file, a byte array and its size, plus retention
directives so the linker keeps the symbols even when nothing references
them.

The programmatic entry point is :func:`resbundle.bundle.generate_bundle`;
the command line lives in :mod:`resbundle.cli`.
"""

from ._version import __version__
from .bundle import BundleOptions, BundleResult, generate_bundle
from .encoding import encode_bytes, wrap
from .emitter import emit_declarations
from .identifiers import derive_identifier

__all__ = [
    "__version__",
    "BundleOptions",
    "BundleResult",
    "generate_bundle",
    "derive_identifier",
    "encode_bytes",
    "emit_declarations",
    "wrap",
]
