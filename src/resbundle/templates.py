# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""String templates used by the resource bundle generator."""

from __future__ import annotations

RETENTION_MACRO = "FORCE_REF_SYMBOL"

# The MSVC linker drops unreferenced globals under /OPT:REF and whole program
# optimization. Exporting the symbol keeps it; on Win32 the C decoration adds
# a leading underscore.
_EXPORT_PRAGMAS = """\
# if defined(_WIN64)
#  define FORCE_REF_SYMBOL(x) __pragma(comment (linker, "/export:" #x))
# else
#  define FORCE_REF_SYMBOL(x) __pragma(comment (linker, "/export:_" #x))
# endif
"""

PREAMBLE_MSVC = (
    "#if defined(_WIN32)\n"
    + _EXPORT_PRAGMAS
    + """\
#else
# define FORCE_REF_SYMBOL(x)
#endif

"""
)

# __pragma is MSVC syntax; MinGW defines _WIN32 but must take the GCC branch.
PREAMBLE_PORTABLE = (
    "#if defined(_MSC_VER)\n"
    + _EXPORT_PRAGMAS
    + """\
#elif defined(__GNUC__) || defined(__clang__)
# define FORCE_REF_SYMBOL(x) \\
  static const void *const resbundle_ref_##x __attribute__((used)) = \\
    (const void *)&x;
#else
# define FORCE_REF_SYMBOL(x)
#endif

"""
)

PREAMBLE_NONE = """\
#define FORCE_REF_SYMBOL(x)

"""

RETENTION_PREAMBLES = {
    "msvc": PREAMBLE_MSVC,
    "portable": PREAMBLE_PORTABLE,
    "none": PREAMBLE_NONE,
}

DEFAULT_RETENTION = "msvc"

SIZE_DECL = "unsigned int  {size_ident} = {size};"
ARRAY_DECL = "const unsigned char {ident}[] = {literal};"
RETAIN_DECL = RETENTION_MACRO + "({symbol})"

TEMPLATE_HEADER = """\
/* Generated file - do not edit.
 * Tool: resbundle {tool_ver}
 * Bundle: {bundle}
 */

#ifndef {guard}
#define {guard}

#ifdef __cplusplus
extern "C" {{
#endif

{declarations}
#ifdef __cplusplus
}}
#endif

#endif /* {guard} */
"""

HEADER_EXTERN_ARRAY = "extern const unsigned char {ident}[];"
HEADER_EXTERN_SIZE = "extern unsigned int  {size_ident};"
