# tests/common/test_text.py
"""
Тесты очистки пользовательского текста.
"""

from __future__ import annotations

import pytest

from ev_crm.common.text import digits_only, escape_html, sanitize_query, unwrap_image


class TestEscapeHtml:

    def test_escapes_markup(self) -> None:
        assert escape_html("<script>alert(1)</script>") == "&lt;script&gt;alert(1)&lt;/script&gt;"

    def test_escapes_ampersand_keeps_quotes(self) -> None:
        assert escape_html('Tom & "Jerry"') == 'Tom &amp; "Jerry"'

    def test_strips_whitespace(self) -> None:
        assert escape_html("  Model Town  ") == "Model Town"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value) -> None:
        assert escape_html(value) == ""

    def test_non_string(self) -> None:
        assert escape_html(42) == "42"


class TestSanitizeQuery:

    def test_removes_tags(self) -> None:
        assert sanitize_query("<img src=x onerror=alert(1)>EV-01") == "EV-01"

    def test_removes_markup_characters(self) -> None:
        assert sanitize_query("a\"b'c`d&e<f") == "abcdef"

    def test_collapses_spaces(self) -> None:
        assert sanitize_query("  ali    raza ") == "ali raza"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value) -> None:
        assert sanitize_query(value) == ""


def test_digits_only() -> None:
    assert digits_only("0300-123 4567") == "03001234567"
    assert digits_only(None) == ""


class TestUnwrapImage:

    def test_plain_string(self) -> None:
        assert unwrap_image("data:image/png;base64,AAAA") == "data:image/png;base64,AAAA"

    def test_wrapped(self) -> None:
        wrapped = {"changingThisBreaksApplicationSecurity": "data:image/png;base64,BBBB"}
        assert unwrap_image(wrapped) == "data:image/png;base64,BBBB"

    @pytest.mark.parametrize("value", [None, "", {}, {"other": "x"}])
    def test_empty(self, value) -> None:
        assert unwrap_image(value) == ""
