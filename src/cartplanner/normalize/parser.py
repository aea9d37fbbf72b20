"""Parse free-text ingredient lines into structured quantities."""

import re
from collections.abc import Callable
from dataclasses import dataclass

from cartplanner.logging_config import get_logger
from cartplanner.normalize.names import canonicalize, extract_name
from cartplanner.normalize.units import Unit, match_unit_prefix

logger = get_logger(__name__)


@dataclass(frozen=True)
class Quantity:
    """One parsed ingredient line."""

    amount: float
    unit: Unit
    ingredient_name: str
    original_text: str
    source_recipe_id: str = ""
    explicit_unit: bool = False  # unit word present in the line
    is_fallback: bool = False  # no numeric prefix found


# =============================================================================
# Numeric Prefix Patterns
# =============================================================================

VULGAR_FRACTIONS: dict[str, str] = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_VULGAR_RE = re.compile(r"(\d)?\s*([" + "".join(VULGAR_FRACTIONS) + "])")
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")

_NUMBER = r"\d+\s+\d+/\d+|\d+/\d+|\d*\.\d+|\d+"
_RANGE_SEP = r"\s*(?:-|–|—|to\s)\s*"
# A number must not continue into another digit, fraction or range
_END = r"(?![\d/.])(?!" + _RANGE_SEP + r"\d)"

_MIXED_RE = re.compile(r"^(?P<whole>\d+)\s+(?P<num>\d+)/(?P<den>\d+)" + _END)
_FRACTION_RE = re.compile(r"^(?P<num>\d+)/(?P<den>\d+)" + _END)
_DECIMAL_RE = re.compile(r"^(?P<value>\d*\.\d+)" + _END)
_INTEGER_RE = re.compile(r"^(?P<value>\d+)" + _END)
_RANGE_RE = re.compile(
    r"^(?P<low>" + _NUMBER + r")" + _RANGE_SEP + r"(?P<high>" + _NUMBER + r")(?![\d/.])"
)


def _fraction(num: str, den: str) -> float | None:
    denominator = int(den)
    if denominator == 0:
        return None
    return int(num) / denominator


def _number_value(text: str) -> float | None:
    """Value of a single number token: mixed, fraction, decimal or integer."""
    text = text.strip()
    if match := _MIXED_RE.fullmatch(text):
        rest = _fraction(match["num"], match["den"])
        return None if rest is None else int(match["whole"]) + rest
    if match := _FRACTION_RE.fullmatch(text):
        return _fraction(match["num"], match["den"])
    if match := _DECIMAL_RE.fullmatch(text) or _INTEGER_RE.fullmatch(text):
        return float(match["value"])
    return None


def _mixed(match: re.Match) -> float | None:
    rest = _fraction(match["num"], match["den"])
    return None if rest is None else int(match["whole"]) + rest


def _range_midpoint(match: re.Match) -> float | None:
    low = _number_value(match["low"])
    high = _number_value(match["high"])
    if low is None or high is None:
        return None
    # "1-1/2" is the hyphenated mixed number 1 1/2, not a range down to 1/2
    if (
        high < low
        and _INTEGER_RE.fullmatch(match["low"])
        and _FRACTION_RE.fullmatch(match["high"])
    ):
        return low + high
    return (low + high) / 2


# Priority order; first match wins. Ranges go first so "1 1/2 to 2" is not cut at "1"
_AMOUNT_RULES: list[tuple[re.Pattern, Callable[[re.Match], float | None]]] = [
    (_RANGE_RE, _range_midpoint),
    (_MIXED_RE, _mixed),
    (_FRACTION_RE, lambda m: _fraction(m["num"], m["den"])),
    (_DECIMAL_RE, lambda m: float(m["value"])),
    (_INTEGER_RE, lambda m: float(m["value"])),
]


def replace_vulgar_fractions(text: str) -> str:
    """Rewrite "1½" as "1 1/2" and "¾" as "3/4"."""

    def _sub(match: re.Match) -> str:
        fraction = VULGAR_FRACTIONS[match.group(2)]
        if match.group(1):
            return f"{match.group(1)} {fraction}"
        return fraction

    return _VULGAR_RE.sub(_sub, text.replace("⁄", "/"))


def match_amount(text: str) -> tuple[float, int] | None:
    """
    Match a leading numeric expression.

    Handles formats like:
    - "1 1/2" (mixed number)
    - "1/2"
    - "2.5"
    - "2"
    - "2-3" or "2 to 3" (range, returns the midpoint)

    Returns:
        Tuple of (amount, length of the matched prefix), or None.
    """
    for pattern, value in _AMOUNT_RULES:
        match = pattern.match(text)
        if not match:
            continue
        amount = value(match)
        if amount is not None:
            return amount, match.end()
    return None


# =============================================================================
# Line Parsing
# =============================================================================


def _prepare(line: str) -> str:
    """Quantity-detection text: descriptor dropped, sizes removed, whitespace collapsed."""
    head = line.split(",", 1)[0]
    head = _PARENTHETICAL_RE.sub(" ", replace_vulgar_fractions(head))
    return " ".join(head.split())


def parse(line: str | None, recipe_id: str = "") -> Quantity | None:
    """
    Parse one ingredient line.

    Anything after the first comma ("3 cloves garlic, minced") is a
    descriptor: it stays in ``original_text`` but is ignored for the amount,
    unit and name. Lines without a numeric prefix ("Salt to taste") become
    one piece named after the whole line.

    Args:
        line: Free-text ingredient line.
        recipe_id: Recipe the line belongs to.

    Returns:
        Parsed Quantity, or None for a blank line.
    """
    if line is None or not line.strip():
        return None

    original = line.strip()
    head = _prepare(original)

    matched = match_amount(head)
    if matched is None:
        logger.debug(f"No numeric prefix in {original!r}, using one piece")
        return Quantity(
            amount=1.0,
            unit=Unit.PIECE,
            ingredient_name=canonicalize(original),
            original_text=original,
            source_recipe_id=recipe_id,
            is_fallback=True,
        )

    amount, end = matched
    rest = head[end:].lstrip()

    unit_match = match_unit_prefix(rest)
    explicit_unit = unit_match[0] if unit_match else None
    unit = explicit_unit or Unit.PIECE

    name = extract_name(head, head[:end], explicit_unit)
    if not name:
        # "2 cups" or a bare number: keep something recognisable as the key
        name = canonicalize(rest) or canonicalize(original)

    if amount <= 0:
        logger.debug(f"Non-positive amount in {original!r}, clamping to 1")
        amount = 1.0

    return Quantity(
        amount=amount,
        unit=unit,
        ingredient_name=name,
        original_text=original,
        source_recipe_id=recipe_id,
        explicit_unit=explicit_unit is not None,
    )


def parse_lines(lines: list[str], recipe_id: str = "") -> list[Quantity]:
    """Parse a recipe's ingredient lines, skipping blank ones."""
    parsed = []
    for line in lines:
        quantity = parse(line, recipe_id)
        if quantity is not None:
            parsed.append(quantity)
    return parsed
