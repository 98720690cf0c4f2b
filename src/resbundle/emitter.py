# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Declaration emission for bundled resources.

The block layout is relied upon by downstream tooling that scans generated
bundles textually: size constant first, then the array, a blank line, the
two retention directives and a closing blank line.
"""

from __future__ import annotations

from typing import Iterable

from .encoding import EncodedLiteral
from .errors import config_error
from .identifiers import size_identifier
from .templates import (
    ARRAY_DECL,
    HEADER_EXTERN_ARRAY,
    HEADER_EXTERN_SIZE,
    RETAIN_DECL,
    RETENTION_PREAMBLES,
    SIZE_DECL,
)

__all__ = ["emit_declarations", "emit_extern_declarations", "select_preamble"]


def emit_declarations(identifier: str, literal: EncodedLiteral) -> str:
    size_ident = size_identifier(identifier)
    lines = [
        SIZE_DECL.format(size_ident=size_ident, size=literal.size),
        ARRAY_DECL.format(ident=identifier, literal=literal.render()),
        "",
        RETAIN_DECL.format(symbol=identifier),
        RETAIN_DECL.format(symbol=size_ident),
        "",
    ]
    return "\n".join(lines) + "\n"


def emit_extern_declarations(identifiers: Iterable[str]) -> str:
    """Render ``extern`` declarations for a companion header."""
    out: list[str] = []
    for ident in identifiers:
        out.append(HEADER_EXTERN_ARRAY.format(ident=ident))
        out.append(
            HEADER_EXTERN_SIZE.format(size_ident=size_identifier(ident))
        )
    return "".join(line + "\n" for line in out)


def select_preamble(retention: str) -> str:
    """Resolve the retention preamble for a target family."""
    try:
        return RETENTION_PREAMBLES[retention]
    except KeyError:
        raise config_error(
            f"Unknown retention target '{retention}'",
            {"choices": sorted(RETENTION_PREAMBLES)},
        ) from None
