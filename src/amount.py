import re
from decimal import Decimal

from errors import MalformedAmount

PRECISION = 4
QUANTUM = Decimal(1).scaleb(-PRECISION)
# Largest magnitude expressible as a signed 64-bit count of ten-thousandths.
MAX_AMOUNT = Decimal(2**63 - 1).scaleb(-PRECISION)
ZERO = Decimal("0.0000")

_AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_amount(text: str) -> Decimal:
    """
    Parse a plain decimal literal into a 4-place fixed-point amount.

    Raises MalformedAmount for anything that is not a plain number
    (exponents, NaN and Infinity included), has more than 4 fractional
    digits, or falls outside the representable range.
    """
    text = text.strip()
    if not _AMOUNT_PATTERN.fullmatch(text):
        raise MalformedAmount(f"not a decimal amount: {text!r}")

    _, _, fraction = text.partition(".")
    if len(fraction) > PRECISION:
        raise MalformedAmount(f"more than {PRECISION} fractional digits: {text!r}")

    value = Decimal(text)
    if abs(value) > MAX_AMOUNT:
        raise MalformedAmount(f"amount out of range: {text!r}")

    return value.quantize(QUANTUM)


def add(a: Decimal, b: Decimal) -> Decimal:
    return (a + b).quantize(QUANTUM)


def sub(a: Decimal, b: Decimal) -> Decimal:
    return (a - b).quantize(QUANTUM)


def format_amount(value: Decimal) -> str:
    """Format with exactly 4 decimal places."""
    if value == 0:
        value = ZERO
    return f"{value.quantize(QUANTUM):f}"
