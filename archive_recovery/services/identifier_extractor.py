"""Pull conversation ids out of pasted text.

Input may be a JSON array, comma- or newline-separated text, or any mixture.
Anything that is not a letter, digit or hyphen separates tokens, and only
tokens longer than ``MIN_ID_LENGTH`` characters are kept.
"""

from __future__ import annotations

import re

MIN_ID_LENGTH = 20

_SEPARATORS = re.compile(r"[^a-zA-Z0-9-]+")


def extract_identifiers(raw_text: str | None) -> list[str]:
    """Return identifier-shaped tokens of *raw_text* in order, duplicates kept."""
    if not raw_text:
        return []
    return [token for token in _SEPARATORS.split(raw_text) if len(token) > MIN_ID_LENGTH]


def unique_identifiers(ids: list[str]) -> list[str]:
    """Drop repeated ids, keeping first occurrences in order."""
    return list(dict.fromkeys(ids))
