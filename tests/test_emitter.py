# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

import pytest

from resbundle.emitter import (
    emit_declarations,
    emit_extern_declarations,
    select_preamble,
)
from resbundle.encoding import encode_bytes
from resbundle.errors import ConfigError
from resbundle.templates import PREAMBLE_MSVC, PREAMBLE_NONE, PREAMBLE_PORTABLE


def test_declaration_block_layout():
    text = emit_declarations("SCRIPTS_INIT_LUA", encode_bytes(b"\x01\x02"))
    assert text == (
        "unsigned int  SCRIPTS_INIT_LUA_SIZE = 2;\n"
        "const unsigned char SCRIPTS_INIT_LUA[] = { 0x01, 0x02 };\n"
        "\n"
        "FORCE_REF_SYMBOL(SCRIPTS_INIT_LUA)\n"
        "FORCE_REF_SYMBOL(SCRIPTS_INIT_LUA_SIZE)\n"
        "\n"
    )


def test_size_is_declared_before_array():
    text = emit_declarations("X", encode_bytes(b"abc", null_terminate=True))
    lines = text.splitlines()
    assert lines[0] == "unsigned int  X_SIZE = 3;"
    assert lines[1].startswith("const unsigned char X[] = {")


def test_extern_declarations():
    text = emit_extern_declarations(["A", "B"])
    assert text.splitlines() == [
        "extern const unsigned char A[];",
        "extern unsigned int  A_SIZE;",
        "extern const unsigned char B[];",
        "extern unsigned int  B_SIZE;",
    ]


def test_preamble_selection():
    assert select_preamble("msvc") is PREAMBLE_MSVC
    assert select_preamble("portable") is PREAMBLE_PORTABLE
    assert select_preamble("none") is PREAMBLE_NONE


def test_msvc_preamble_is_noop_off_windows():
    assert "#if defined(_WIN32)" in PREAMBLE_MSVC
    assert '"/export:_" #x' in PREAMBLE_MSVC
    assert "# define FORCE_REF_SYMBOL(x)\n#endif" in PREAMBLE_MSVC


def test_portable_preamble_retains_on_gcc_and_clang():
    assert "__attribute__((used))" in PREAMBLE_PORTABLE
    assert "/export:" in PREAMBLE_PORTABLE


def test_unknown_retention_target():
    with pytest.raises(ConfigError) as exc:
        select_preamble("watcom")
    assert exc.value.code == "E_CONFIG"


def test_portable_preamble_keys_pragmas_on_msvc_compiler():
    # MinGW defines _WIN32 but cannot parse __pragma.
    assert PREAMBLE_PORTABLE.startswith("#if defined(_MSC_VER)\n")
    assert "defined(_WIN32)" not in PREAMBLE_PORTABLE
    assert PREAMBLE_MSVC.startswith("#if defined(_WIN32)\n")
