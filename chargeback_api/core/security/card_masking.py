"""PCI compliance: card number masking.

Chargebacks never store a raw card number. Everything except the last four
characters is replaced with a mask character before the entity exists.

Examples:
    mask_card_number("4111 1111 1111 1111")  -> "************1111"
    mask_card_number("123")                   -> "****"
"""

from __future__ import annotations

import re

MASK_CHAR = "*"
VISIBLE_DIGITS = 4
SHORT_CARD_MASK = MASK_CHAR * VISIBLE_DIGITS

SEPARATOR_PATTERN = re.compile(r"[ -]")


def clean_card_number(card_number: str) -> str:
    """Strip space and hyphen separators from a card number."""
    return SEPARATOR_PATTERN.sub("", card_number)


def mask_card_number(card_number: str) -> str:
    """Mask a card number, keeping only the last four characters visible.

    Inputs of four characters or fewer (after removing separators) collapse
    to a fixed "****" so that short values never leak.
    """
    cleaned = clean_card_number(card_number)

    if len(cleaned) <= VISIBLE_DIGITS:
        return SHORT_CARD_MASK

    return MASK_CHAR * (len(cleaned) - VISIBLE_DIGITS) + cleaned[-VISIBLE_DIGITS:]
