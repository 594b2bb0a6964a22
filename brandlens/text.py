"""String helpers: slugs, URL normalization, and repair of escaped LLM output."""

from __future__ import annotations

import re
import secrets
import string

from slugify import slugify as _slugify

_SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

_CODE_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)

# Repairs applied in order. Models sometimes pad \u escapes with an extra
# "00" pair, or emit Python-style \x escapes, neither of which JSON accepts.
_PADDED_UNICODE_RE = re.compile(r"\\u0000([0-9a-fA-F]{2})")
_BROKEN_INVERTED_QUESTION_RE = re.compile(r"\\u00191")
_PADDED_HEX_RE = re.compile(r"\\x00([0-9a-fA-F]{2})")
_HEX_RE = re.compile(r"\\x([0-9a-fA-F]{2})")
_SURROGATE_PAIR_RE = re.compile(r"\\u(d[89ab][0-9a-f]{2})\\u(d[c-f][0-9a-f]{2})", re.IGNORECASE)
_UNICODE_RE = re.compile(r"\\u([0-9a-fA-F]{4})")

# 0x19 and 0x91 show up where models meant an opening question mark
_INVERTED_QUESTION_CODES = {0x19, 0x91}
# Decoding these would break the surrounding JSON string literal
_JSON_SENSITIVE_CODES = {0x22, 0x5C}


def slugify(name: str) -> str:
    """Lowercase ASCII slug: diacritics stripped, runs of other characters to one hyphen."""
    return _slugify(name)


def random_suffix(length: int = 4) -> str:
    return "".join(secrets.choice(_SLUG_SUFFIX_ALPHABET) for _ in range(length))


def normalize_website_url(raw: str) -> str:
    """Prepend https:// when the value has no scheme."""
    value = raw.strip()
    if not value:
        return value
    return value if value.startswith("http") else f"https://{value}"


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    match = _CODE_FENCE_RE.match(text)
    return match.group(1) if match else text.strip()


def _hex_char(match: re.Match[str]) -> str:
    code = int(match.group(1), 16)
    if code in _INVERTED_QUESTION_CODES:
        return "¿"
    if code in _JSON_SENSITIVE_CODES:
        return "\\u%04x" % code
    return chr(code)


def _unicode_char(match: re.Match[str]) -> str:
    code = int(match.group(1), 16)
    if code in _JSON_SENSITIVE_CODES:
        return match.group(0)
    return chr(code)


def _surrogate_pair(match: re.Match[str]) -> str:
    high = int(match.group(1), 16)
    low = int(match.group(2), 16)
    return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


def decode_unicode_escapes(text: str) -> str:
    """Turn escaped and malformed escape sequences into real characters.

    Handles the patterns observed in model output:

    - ``\\u0000e1`` (padded unicode escape) -> ``á``
    - ``\\u00191`` -> ``¿``
    - ``\\x00f3`` (padded hex escape) -> ``ó``
    - ``\\xHH`` -> the Latin-1 character, with 0x19/0x91 read as ``¿``
    - ``\\uD83D\\uDE00`` surrogate pairs -> a single astral character
    - ``\\uXXXX`` -> the character

    Escaped quotes and backslashes are left alone so the result still parses
    as JSON.
    """
    if not text:
        return text

    text = _PADDED_UNICODE_RE.sub(r"\\u00\1", text)
    text = _BROKEN_INVERTED_QUESTION_RE.sub(r"\\u00bf", text)
    text = _PADDED_HEX_RE.sub(_hex_char, text)
    text = _HEX_RE.sub(_hex_char, text)
    text = _SURROGATE_PAIR_RE.sub(_surrogate_pair, text)
    return _UNICODE_RE.sub(_unicode_char, text)


def normalize_query_text(text: str) -> str:
    """Comparison key for duplicate detection: casefolded, single-spaced."""
    return " ".join(text.casefold().split()).rstrip("?.! ")
