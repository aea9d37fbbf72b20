"""Parse and normalize free-text ingredient quantities."""

from cartplanner.normalize.names import canonicalize, extract_name
from cartplanner.normalize.parser import Quantity, match_amount, parse, parse_lines
from cartplanner.normalize.units import (
    Unit,
    UnitFamily,
    convert,
    family,
    from_base,
    resolve,
    to_base,
    unit_label,
)

__all__ = [
    "Quantity",
    "Unit",
    "UnitFamily",
    "canonicalize",
    "convert",
    "extract_name",
    "family",
    "from_base",
    "match_amount",
    "parse",
    "parse_lines",
    "resolve",
    "to_base",
    "unit_label",
]
