# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Symbol naming for bundled resources.

A resource at ``scripts/init.lua`` is exposed as ``SCRIPTS_INIT_LUA`` (the
byte array) and ``SCRIPTS_INIT_LUA_SIZE`` (its length). Slashes of both
kinds, spaces, dashes and dots become underscores, the file extension stays
as a suffix, and the whole name is uppercased.
"""

from __future__ import annotations

import re

__all__ = ["derive_identifier", "size_identifier", "is_valid_identifier"]

_SEPARATORS_RE = re.compile(r"[/\\ .\-]")
_INVALID_RE = re.compile(r"[^A-Za-z0-9_]")
_VALID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SIZE_SUFFIX = "_SIZE"


def derive_identifier(path: str, prefix: str = "", suffix: str = "") -> str:
    """Map a resource path to the C identifier of its byte array.

    The function is total: any string yields a valid identifier. An empty
    path with no prefix or suffix degrades to ``_``.
    """
    body = _SEPARATORS_RE.sub("_", str(path))
    ident = f"{prefix or ''}{body}{suffix or ''}".upper()
    # str.upper() can map some characters outside ASCII; coerce last.
    ident = _INVALID_RE.sub("_", ident)
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    return ident


def size_identifier(identifier: str) -> str:
    return identifier + SIZE_SUFFIX


def is_valid_identifier(name: str) -> bool:
    return _VALID_RE.match(name) is not None
