"""Unit tests for card number masking."""

import pytest

from chargeback_api.core.security.card_masking import (
    SHORT_CARD_MASK,
    clean_card_number,
    mask_card_number,
)


class TestCleanCardNumber:
    """Test separator removal."""

    def test_removes_spaces_and_hyphens(self):
        """Test spaces and hyphens are stripped."""
        assert clean_card_number("4111 1111-1111 1111") == "4111111111111111"

    def test_keeps_other_characters(self):
        """Test characters other than space and hyphen are left alone."""
        assert clean_card_number("4111.1111") == "4111.1111"


class TestMaskCardNumber:
    """Test mask_card_number."""

    def test_masks_sixteen_digit_card(self):
        """Test a standard card keeps only the last four digits."""
        assert mask_card_number("4111111111111111") == "************1111"

    def test_masks_card_with_separators(self):
        """Test separators are removed before masking."""
        assert mask_card_number("4111 1111 1111 1111") == "************1111"
        assert mask_card_number("4111-1111-1111-1234") == "************1234"

    def test_masks_fifteen_digit_card(self):
        """Test mask length follows the cleaned card length."""
        masked = mask_card_number("378282246310005")
        assert masked == "*" * 11 + "0005"
        assert len(masked) == 15

    def test_five_characters_shows_last_four(self):
        """Test the shortest input that still reveals digits."""
        assert mask_card_number("12345") == "*2345"

    @pytest.mark.parametrize("card_number", ["1234", "123", "1", "", "12 34", "--"])
    def test_short_input_is_fully_masked(self, card_number):
        """Test inputs of four characters or fewer collapse to a fixed mask."""
        assert mask_card_number(card_number) == SHORT_CARD_MASK

    def test_masked_value_never_contains_leading_digits(self):
        """Test no digit before the last four survives."""
        masked = mask_card_number("5500000000000004")
        assert masked[:-4] == "*" * 12
