"""Canonical ingredient names, the aggregation key across recipes."""

import re

from cartplanner.normalize.units import Unit, match_unit_prefix

_EDGE_PUNCTUATION = " ,.;:"
_LEADING_NUMERIC_RE = re.compile(r"^[\d\s/.\-–]+")
_LEADING_OF_RE = re.compile(r"^of\s+", re.IGNORECASE)


def canonicalize(text: str) -> str:
    """Lowercase, collapse whitespace and strip edge punctuation."""
    return " ".join(text.lower().split()).strip(_EDGE_PUNCTUATION)


def _strip_quantity(text: str, matched_quantity: str) -> str:
    quantity = " ".join(matched_quantity.split())
    if quantity and text.startswith(quantity):
        return text[len(quantity) :]
    return text


def extract_name(
    line: str,
    matched_quantity: str,
    matched_unit: Unit | None = None,
    implicit_unit: bool = False,
) -> str:
    """
    Derive the canonical ingredient name from an ingredient line.

    Rules are tried in order and the first that applies wins:

    1. ``matched_unit`` given: strip "<qty> <unit word>" where the unit word
       resolves to ``matched_unit``.
    2. ``implicit_unit``: strip "<qty> <first word>", treating the first word
       after the number as a unit the table does not know.
    3. Strip the quantity and any leading numeric or fraction characters.

    Args:
        line: Ingredient text without its trailing descriptor.
        matched_quantity: The numeric prefix as it appears in ``line``.
        matched_unit: Unit the parser matched explicitly, if any.
        implicit_unit: Whether to apply rule 2.

    Returns:
        Canonical name, possibly empty when the line holds only a quantity.
    """
    text = " ".join(line.split())
    rest = _strip_quantity(text, matched_quantity).lstrip()

    if matched_unit is not None:
        unit_match = match_unit_prefix(rest)
        if unit_match and unit_match[0] == matched_unit:
            return _finish(rest[unit_match[1] :])

    if implicit_unit:
        words = rest.split(" ", 1)
        if len(words) == 2 and words[1].strip():
            return _finish(words[1])

    return _finish(_LEADING_NUMERIC_RE.sub("", rest))


def _finish(remainder: str) -> str:
    return canonicalize(_LEADING_OF_RE.sub("", remainder.strip()))
