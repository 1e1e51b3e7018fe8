"""Tests for cache label extraction."""

from __future__ import annotations

from pinbridge.assuan.labels import extract_key_id, extract_label, extract_name

GPG_DESCRIPTION = (
    "Please enter the passphrase to unlock the OpenPGP secret key:\n"
    '"Alice Example <alice@example.org>"\n'
    "255-bit EDDSA key, ID 0x1122334455667788,\n"
    "created 2024-01-01."
)


class TestExtractLabel:
    """Tests for label assembly."""

    def test_name_and_key_id(self) -> None:
        desc = 'Please enter passphrase for "Alice Example" ID: 0xABCDEF0123456789'
        assert extract_label(desc) == "Alice Example (ABCDEF0123456789)"

    def test_real_agent_description(self) -> None:
        assert extract_label(GPG_DESCRIPTION) == (
            "Alice Example <alice@example.org> (1122334455667788)"
        )

    def test_key_id_only(self) -> None:
        """Without a quoted name the id is prefixed and upper-cased."""
        assert extract_label("Unlock key ID 0xdeadbeef") == "GPG ID DEADBEEF"

    def test_name_only(self) -> None:
        assert extract_label('Passphrase for "Bob"') == "Bob"

    def test_neither(self) -> None:
        assert extract_label("Please enter your passphrase") is None

    def test_empty(self) -> None:
        assert extract_label("") is None


class TestExtractName:
    """Tests for the quoted-name scan."""

    def test_first_to_last_quote(self) -> None:
        assert extract_name('a "b" c "d" e') == 'b" c "d'

    def test_single_quote_char_is_not_a_name(self) -> None:
        assert extract_name('only one " here') is None


class TestExtractKeyId:
    """Tests for the key-id scan."""

    def test_case_insensitive_marker(self) -> None:
        assert extract_key_id("key id: abcdef12") == "abcdef12"

    def test_without_0x(self) -> None:
        assert extract_key_id("ID 89ABCDEF") == "89ABCDEF"

    def test_separator_required(self) -> None:
        assert extract_key_id("ID0x89ABCDEF") is None

    def test_too_short(self) -> None:
        assert extract_key_id("ID 0xABC") is None

    def test_capped_at_forty_digits(self) -> None:
        fingerprint = "A" * 45
        assert extract_key_id(f"ID {fingerprint}") == "A" * 40

    def test_zero_x_prefix_optional_fallback(self) -> None:
        """'0x' followed by too few digits may still start a bare id."""
        assert extract_key_id("ID 0x1") is None
        assert extract_key_id("ID 0123ABCD") == "0123ABCD"

    def test_skips_marker_without_hex(self) -> None:
        """An early 'id' that is not followed by an id does not stop the scan."""
        assert extract_key_id("valid input, ID 0x12345678") == "12345678"
