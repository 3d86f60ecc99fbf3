from __future__ import annotations

import logging
import re
from dataclasses import dataclass

_SURROGATE_RE = re.compile("[\ud800-\udfff]")
_CARRIAGE_RETURN_RE = re.compile(r"\r\n?")


@dataclass(frozen=True)
class SanitizedText:
    value: str
    nul_removed: int = 0
    surrogates_replaced: int = 0
    newlines_normalized: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.nul_removed or self.surrogates_replaced or self.newlines_normalized)


def sanitize_text(value: str, *, strip: bool) -> SanitizedText:
    """Make user text storable in Postgres: drop NUL, replace lone surrogates, use LF newlines."""
    nul_removed = value.count("\x00")
    cleaned = value.replace("\x00", "")
    cleaned, surrogates_replaced = _SURROGATE_RE.subn("\ufffd", cleaned)
    cleaned, newlines_normalized = _CARRIAGE_RETURN_RE.subn("\n", cleaned)
    if strip:
        cleaned = cleaned.strip()
    return SanitizedText(
        value=cleaned,
        nul_removed=nul_removed,
        surrogates_replaced=surrogates_replaced,
        newlines_normalized=newlines_normalized,
    )


def sanitize_optional_text(value: str | None, *, strip: bool) -> SanitizedText | None:
    if value is None:
        return None
    return sanitize_text(value, strip=strip)


def log_sanitization(logger: logging.Logger, *, location: str, result: SanitizedText | None) -> None:
    if result is None or not result.changed:
        return
    logger.debug(
        "Sanitized text for %s (nul_removed=%d, surrogates_replaced=%d, newlines_normalized=%d).",
        location,
        result.nul_removed,
        result.surrogates_replaced,
        result.newlines_normalized,
    )
