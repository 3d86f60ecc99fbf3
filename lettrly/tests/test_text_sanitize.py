from __future__ import annotations

from lettrly.features.shared.text_sanitize import sanitize_optional_text, sanitize_text


def test_sanitize_text_removes_nul_bytes():
    result = sanitize_text("ab\x00cd\x00", strip=False)
    assert result.value == "abcd"
    assert result.nul_removed == 2
    assert result.changed is True


def test_sanitize_text_replaces_surrogates():
    result = sanitize_text("ok\ud800\udfffdone", strip=False)
    assert result.value == "ok\ufffd\ufffddone"
    assert result.surrogates_replaced == 2


def test_sanitize_text_normalizes_crlf_and_cr():
    result = sanitize_text("Dear you,\r\nthanks\rbye\n", strip=False)
    assert result.value == "Dear you,\nthanks\nbye\n"
    assert result.newlines_normalized == 2


def test_sanitize_text_strip_toggle():
    assert sanitize_text("  x \n", strip=False).value == "  x \n"
    assert sanitize_text("  x \n", strip=True).value == "x"


def test_sanitize_optional_text_handles_none():
    assert sanitize_optional_text(None, strip=True) is None


def test_unchanged_text_reports_no_changes():
    result = sanitize_text("plain letter", strip=False)
    assert result.value == "plain letter"
    assert result.changed is False
