"""Unit tests for bytecode and calldata matching primitives."""

import pytest

from ethgas.artifacts.matching import (
    compute_method_composite_key,
    fingerprint,
    matches_template,
    method_selector,
)


class TestMethodSelector:
    """Test selector extraction from calldata."""

    def test_extracts_first_four_bytes(self):
        assert method_selector("0xa9059cbb" + "00" * 64) == "a9059cbb"

    def test_normalizes_case_and_prefix(self):
        assert method_selector("0xA9059CBB") == "a9059cbb"
        assert method_selector("a9059cbb00") == "a9059cbb"

    @pytest.mark.parametrize("data", ["0x", "", "0xa9059c", None])
    def test_short_calldata_has_no_selector(self, data):
        assert method_selector(data) is None


class TestCompositeKey:
    """Test composite key derivation."""

    def test_key_depends_only_on_name_and_selector(self):
        first = compute_method_composite_key("Token", "0xa9059cbb" + "11" * 64)
        second = compute_method_composite_key("Token", "0xa9059cbb" + "22" * 64)
        assert first == second == "Token_a9059cbb"

    def test_no_key_without_name_or_selector(self):
        assert compute_method_composite_key(None, "0xa9059cbb") is None
        assert compute_method_composite_key("Token", "0x") is None


class TestFingerprint:
    """Test runtime code fingerprinting."""

    def test_same_code_same_fingerprint(self):
        assert fingerprint("0x6080") == fingerprint("0X6080".lower())
        assert fingerprint("0x6080") == fingerprint("6080")

    def test_case_insensitive(self):
        assert fingerprint("0xABCDEF") == fingerprint("0xabcdef")

    def test_different_code_different_fingerprint(self):
        assert fingerprint("0x6080") != fingerprint("0x6081")

    def test_is_sha1_hex(self):
        assert len(fingerprint("0x")) == 40


class TestMatchesTemplate:
    """Test creation bytecode matching against compiled templates."""

    def test_exact_match(self):
        assert matches_template("0x60806040", "0x60806040")

    def test_trailing_constructor_arguments_allowed(self):
        assert matches_template("0x60806040" + "00" * 32, "0x60806040")

    def test_different_code_does_not_match(self):
        assert not matches_template("0x60806041", "0x60806040")

    def test_template_must_match_from_the_start(self):
        assert not matches_template("0xff60806040", "0x60806040")

    def test_input_shorter_than_template_does_not_match(self):
        assert not matches_template("0x6080", "0x60806040")

    def test_case_insensitive(self):
        assert matches_template("0xABCDEF", "0xabcdef")

    def test_legacy_link_placeholder_is_wildcard(self):
        placeholder = "__MathLib_______________________________"
        assert len(placeholder) == 40
        template = "0x6080" + "73" + placeholder + "6040"
        linked = "0x6080" + "73" + "ab" * 20 + "6040"
        assert matches_template(linked, template)

    def test_hashed_link_placeholder_is_wildcard(self):
        placeholder = "__$" + "1f" * 17 + "$__"
        assert len(placeholder) == 40
        template = "0x6080" + "73" + placeholder + "6040"
        linked = "0x6080" + "73" + "cd" * 20 + "6040"
        assert matches_template(linked, template)

    def test_placeholder_only_covers_its_own_width(self):
        template = "0x73" + "__MathLib_______________________________" + "6040"
        assert not matches_template("0x73" + "ab" * 20 + "6041", template)

    def test_library_address_placeholder_is_wildcard(self):
        template = "0x6080" + "73" + "f" * 40 + "3014"
        deployed = "0x6080" + "73" + "12" * 20 + "3014"
        assert matches_template(deployed, template)

    def test_empty_template_matches_anything(self):
        assert matches_template("0x60806040", "0x")
        assert matches_template("0x60806040", "")
