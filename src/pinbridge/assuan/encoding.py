"""Assuan response encoding.

This module implements the escaping and line assembly rules of the
pinentry side of the Assuan protocol:
- Percent-encoding of credential payloads (everything but ASCII
  alphanumerics becomes %XX of its UTF-8 bytes)
- Light line escaping for informational data (%, CR and LF only)
- Percent-decoding of incoming arguments with raw-text fallback
- Assembly of OK / D / ERR response lines

Response Format:
    OK
    D <escaped-payload>\\nOK
    ERR <code> <text>
"""

from __future__ import annotations

import re
import unicodedata
from enum import IntEnum
from urllib.parse import unquote

OK = "OK"
DATA_PREFIX = "D "
ERR_PREFIX = "ERR"

# Line separator characters removed from a credential before encoding
NEWLINE_CHARS = frozenset("\n\r\x0b\x0c\x85\u2028\u2029")

# A '%' not followed by two hex digits makes an argument undecodable
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class ErrorCode(IntEnum):
    """Numeric error codes emitted in ERR lines."""

    GETPIN_CANCELLED = 83886179
    CONFIRM_CANCELLED = 114
    NOT_SUPPORTED = 83886361


_ERROR_TEXT = {
    ErrorCode.GETPIN_CANCELLED: "Operation cancelled",
    ErrorCode.CONFIRM_CANCELLED: "Operation cancelled",
    ErrorCode.NOT_SUPPORTED: "Not supported",
}


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def percent_encode(text: str) -> str:
    """Escape every character that is not an ASCII letter or digit.

    Non-ASCII characters are encoded byte by byte from their UTF-8 form,
    so the output is always plain ASCII and never contains a newline.

    Example:
        >>> percent_encode("a b%")
        'a%20b%25'
    """
    parts: list[str] = []
    for ch in text:
        if _is_ascii_alnum(ch):
            parts.append(ch)
        else:
            parts.extend(f"%{byte:02X}" for byte in ch.encode("utf-8"))
    return "".join(parts)


def percent_decode(text: str) -> str:
    """Decode %XX escapes, returning the raw text if decoding fails.

    A stray '%' or an escape sequence that does not form valid UTF-8
    leaves the argument unmodified.
    """
    if "%" not in text:
        return text
    if _MALFORMED_ESCAPE.search(text):
        return text
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError:
        return text


def escape_line(text: str) -> str:
    """Escape only the characters that would break an Assuan line."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def encode_credential(credential: str) -> str:
    """Prepare a credential for a D line.

    Line separators are stripped (pasted passphrases often carry one),
    the text is NFC-normalized, then percent-encoded.
    """
    cleaned = "".join(ch for ch in credential if ch not in NEWLINE_CHARS)
    return percent_encode(unicodedata.normalize("NFC", cleaned))


def ok() -> str:
    """Plain success response."""
    return OK


def data_response(payload: str) -> str:
    """Success response carrying an already-escaped payload."""
    return f"{DATA_PREFIX}{payload}\n{OK}"


def credential_response(credential: str) -> str:
    """Success response carrying a credential."""
    return data_response(encode_credential(credential))


def error_response(code: ErrorCode, text: str | None = None) -> str:
    """Failure response for one of the defined error codes."""
    return f"{ERR_PREFIX} {int(code)} {text or _ERROR_TEXT[code]}"
