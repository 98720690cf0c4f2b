# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

import pytest

from resbundle.encoding import decode_tokens, encode_bytes, wrap


def test_wrap_splits_at_column():
    assert wrap("abcdef", 4) == ["abcd", "ef"]
    assert wrap("abcd", 4) == ["abcd"]


def test_wrap_empty_text_has_no_lines():
    assert wrap("", 32) == []


def test_wrap_concatenation_restores_text():
    text = "0123456789abcdef" * 5 + "012"
    assert "".join(wrap(text, 32)) == text


def test_wrap_rejects_non_positive_width():
    with pytest.raises(ValueError):
        wrap("abc", 0)


def test_encode_two_bytes():
    lit = encode_bytes(b"\x01\x02")
    assert lit.size == 2
    assert lit.element_count == 2
    assert lit.render() == "{ 0x01, 0x02 }"


def test_encode_null_terminated_keeps_size():
    lit = encode_bytes(b"\x01\x02", null_terminate=True)
    assert lit.size == 2
    assert lit.element_count == 3
    assert lit.render() == "{ 0x01, 0x02, 0x00 }"
    assert lit.tokens[-1] == "0x00"


def test_hex_is_lowercase():
    assert encode_bytes(b"\xab\xcd").render() == "{ 0xab, 0xcd }"


def test_sixteen_bytes_per_line():
    lit = encode_bytes(bytes(range(17)))
    assert len(lit.lines) == 2
    assert lit.lines[0].count("0x") == 16
    assert lit.lines[1] == "0x10"
    rendered = lit.render()
    assert rendered.startswith("{\n  0x00, 0x01,")
    assert "0x0f,\n  0x10\n}" in rendered
    assert not rendered.rstrip("}").rstrip().endswith(",")


def test_terminator_can_start_a_new_line():
    lit = encode_bytes(bytes(16), null_terminate=True)
    assert lit.size == 16
    assert len(lit.lines) == 2
    assert lit.lines[1] == "0x00"


def test_empty_input():
    assert encode_bytes(b"").render() == "{ }"
    lit = encode_bytes(b"", null_terminate=True)
    assert lit.size == 0
    assert lit.render() == "{ 0x00 }"


def test_line_breaks_do_not_change_decoded_bytes():
    data = bytes(range(256))
    assert decode_tokens(encode_bytes(data).render()) == data


def test_decode_accepts_uppercase_hex():
    assert decode_tokens("{ 0xAB, 0Xcd, 0x0F }") == b"\xab\xcd\x0f"
