"""Unicode normalization and case-insensitive match keys.

Policy:
- Apply NFC early so composed and decomposed input compare equal.
- For matching: NFC -> lowercase. No trimming, no punctuation or accent
  stripping; terms and definitions are matched exactly apart from case.
"""

from __future__ import annotations

import unicodedata as ud


def normalize_text_nfc(text: str) -> str:
    """Apply Unicode NFC to input text (safe for None-like inputs)."""
    if text is None:
        return ""
    return ud.normalize("NFC", str(text))


def match_key(text: str) -> str:
    """Key used by every term/definition lookup.

    Two strings are "the same" term or definition iff their keys are equal.
    """
    return normalize_text_nfc(text).lower()


def same_text(a: str, b: str) -> bool:
    return match_key(a) == match_key(b)
