"""Human-readable labels for cached credentials.

gpg-agent descriptions look like:

    Please enter the passphrase to unlock the OpenPGP secret key:
    "Alice Example <alice@example.org>"
    255-bit EDDSA key, ID 0xABCDEF0123456789,
    created 2024-01-01.

Two independent scans pull out the quoted user name and the key id, which
are assembled into a label such as ``Alice Example <alice@example.org>
(ABCDEF0123456789)``. Either part may be missing.
"""

from __future__ import annotations

from string import hexdigits

MIN_KEY_ID_LEN = 8
MAX_KEY_ID_LEN = 40

_ID_MARKER = "id"
_SEPARATORS = frozenset(": \t\r\n\f\v")
_HEX = frozenset(hexdigits)


def extract_name(description: str) -> str | None:
    """Return the text between the first and the last double quote."""
    start = description.find('"')
    end = description.rfind('"')
    if start == -1 or start == end:
        return None
    return description[start + 1 : end]


def _key_id_at(description: str, pos: int) -> str | None:
    """Try to read ``ID[:\\s]+(0x)?HEX{8,40}`` starting at ``pos``."""
    i = pos + len(_ID_MARKER)
    n = len(description)

    sep_start = i
    while i < n and description[i] in _SEPARATORS:
        i += 1
    if i == sep_start:
        return None

    if description[i : i + 2].lower() == "0x":
        # The 0x is optional: "0x" followed by too few hex digits may still
        # be a bare id starting with "0"
        hex_id = _scan_hex(description, i + 2)
        if hex_id is not None:
            return hex_id
    return _scan_hex(description, i)


def _scan_hex(description: str, start: int) -> str | None:
    end = start
    while end < len(description) and end - start < MAX_KEY_ID_LEN and description[end] in _HEX:
        end += 1
    if end - start < MIN_KEY_ID_LEN:
        return None
    return description[start:end]


def extract_key_id(description: str) -> str | None:
    """Find the first ``ID`` marker followed by a hex key id.

    Matching is case-insensitive and the marker may appear inside a longer
    word, mirroring how gpg-agent descriptions are usually scanned.
    """
    lowered = description.lower()
    pos = lowered.find(_ID_MARKER)
    while pos != -1:
        key_id = _key_id_at(description, pos)
        if key_id is not None:
            return key_id
        pos = lowered.find(_ID_MARKER, pos + 1)
    return None


def extract_label(description: str) -> str | None:
    """Build a cache label from a free-text description.

    Returns:
        ``"Name (KEYID)"``, ``"Name"``, ``"GPG ID KEYID"``, or None when
        neither part is present.
    """
    name = extract_name(description)
    key_id = extract_key_id(description)

    if name is not None and key_id is not None:
        return f"{name} ({key_id.upper()})"
    if name is not None:
        return name
    if key_id is not None:
        return f"GPG ID {key_id.upper()}"
    return None
