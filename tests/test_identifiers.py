# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

import pytest

from resbundle.identifiers import (
    derive_identifier,
    is_valid_identifier,
    size_identifier,
)


@pytest.mark.parametrize(
    "path,expected",
    [
        ("scripts/init.lua", "SCRIPTS_INIT_LUA"),
        ("assets\\img\\logo.png", "ASSETS_IMG_LOGO_PNG"),
        ("my file-name.v2.txt", "MY_FILE_NAME_V2_TXT"),
        ("./a.txt", "__A_TXT"),
        ("weird+name(1).bin", "WEIRD_NAME_1__BIN"),
        ("3d/model.obj", "_3D_MODEL_OBJ"),
    ],
)
def test_derive_identifier_sanitizes_path(path, expected):
    assert derive_identifier(path) == expected


def test_prefix_and_suffix_are_applied():
    assert derive_identifier("icon.png", "RES_", "_V1") == "RES_ICON_PNG_V1"


def test_prefix_is_uppercased_with_the_rest():
    assert derive_identifier("icon.png", "res_") == "RES_ICON_PNG"


def test_empty_path_degrades_to_underscore():
    assert derive_identifier("") == "_"
    assert derive_identifier("", "P_") == "P_"


def test_derivation_is_pure():
    a = derive_identifier("data/level-1.json", "X_", "_Y")
    b = derive_identifier("data/level-1.json", "X_", "_Y")
    assert a == b == "X_DATA_LEVEL_1_JSON_Y"


def test_results_are_valid_c_identifiers():
    for path in ["é/ü.txt", "a b/c-d.e", "1", "$HOME/x", "..", "tab\there"]:
        ident = derive_identifier(path)
        assert is_valid_identifier(ident), (path, ident)
        assert ident == ident.upper()


def test_size_identifier():
    assert size_identifier("SCRIPTS_INIT_LUA") == "SCRIPTS_INIT_LUA_SIZE"
