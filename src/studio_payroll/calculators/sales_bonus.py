"""Sales bonus for multi-class package products.

The bonus for one unit sold is the rule's ``sales_bonus_unit`` times the
number of sessions in the package. Package size is recognized from the
product label; single sessions and ad-hoc extras earn nothing.
"""

from __future__ import annotations

import re
from decimal import Decimal

from studio_payroll.calculators.types import ZERO, PayrollRule, SalesRecord

MIN_PACKAGE_SIZE = 2

_UNITS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
}
_TEENS = {
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}
_TENS = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
}
# Spelled-out sizes from one to fifty-nine, e.g. "twenty-five"
_NUMBER_WORDS = {**_UNITS, **_TEENS, **_TENS}

_WORD_SIZE = (
    r"(?:{tens})(?:[\s-](?:{units}))?|{teens}|{units}".format(
        tens="|".join(_TENS),
        units="|".join(_UNITS),
        teens="|".join(_TEENS),
    )
)

_PACKAGE_RE = re.compile(
    r"\b(?P<size>\d+|" + _WORD_SIZE + r")[\s-]*(?:session|class|lesson)e?s?\b",
    re.IGNORECASE,
)

# Card product labels from the studio's earlier catalogue
LEGACY_PACKAGE_LABELS = {
    "十堂卡": 10,
    "五堂卡": 5,
}


def package_size(product: str) -> int | None:
    """Sessions in the package a product label names, if any."""
    for label, size in LEGACY_PACKAGE_LABELS.items():
        if label in product:
            return size

    match = _PACKAGE_RE.search(product)
    if match is None:
        return None
    raw = match.group("size").lower()
    if raw.isdigit():
        return int(raw)
    return sum(_NUMBER_WORDS[word] for word in re.split(r"[\s-]", raw))


def unit_bonus(product: str, rule: PayrollRule) -> Decimal:
    """Bonus for one unit of a product under a rule."""
    size = package_size(product)
    if size is None or size < MIN_PACKAGE_SIZE:
        return ZERO
    return rule.sales_bonus_unit * size


def sale_bonus(sale: SalesRecord, rule: PayrollRule) -> Decimal:
    """Bonus for a sales record (unit bonus times quantity)."""
    return unit_bonus(sale.product, rule) * sale.quantity
