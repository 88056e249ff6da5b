"""
Input checks for gains, limits and simulation settings.

The ``validate_*`` helpers raise :class:`ValidationError` and return the
value as a float; :func:`parse_decimal` never raises and maps bad operator
text to NaN instead.
"""

from typing import Any, Optional, Tuple
import math
import numbers
import re


# "1,000" style: a non-zero lead of 1-3 digits, a comma, then exactly three digits
_THOUSANDS_GROUP = re.compile(r"^[+-]?[1-9]\d{0,2},\d{3}$")


class ValidationError(ValueError):
    """A parameter is outside its allowed domain."""
    pass


def _as_real(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name} must be a real number, got {type(value).__name__}")
    return float(value)


def validate_positive(value: float, name: str) -> float:
    """
    Require ``value > 0``.

    Args:
        value: Number to check
        name: Parameter name used in the error message

    Returns:
        ``value`` as a float

    Raises:
        ValidationError: If value is zero, negative, NaN or not a number
    """
    value = _as_real(value, name)
    if not value > 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, name: str) -> float:
    """Require ``value >= 0``; NaN is rejected."""
    value = _as_real(value, name)
    if not value >= 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_range(
    value: float,
    name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None
) -> float:
    """
    Require a number, optionally inside ``[min_val, max_val]``.

    Raises:
        ValidationError: If value is NaN or outside the bounds
    """
    value = _as_real(value, name)
    if math.isnan(value):
        raise ValidationError(f"{name} must be a number, got NaN")
    if min_val is not None and value < min_val:
        raise ValidationError(f"{name} must be >= {min_val}, got {value}")
    if max_val is not None and value > max_val:
        raise ValidationError(f"{name} must be <= {max_val}, got {value}")
    return value


def validate_limits(limits: Tuple[float, float], name: str) -> Tuple[float, float]:
    """Validate a ``(low, high)`` pair with ``low < high``."""
    try:
        low, high = limits
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a (min, max) pair, got {limits!r}")
    low = validate_range(low, f"{name}[0]")
    high = validate_range(high, f"{name}[1]")
    if not low < high:
        raise ValidationError(f"{name} min must be less than max, got ({low}, {high})")
    return (low, high)


def is_positive_finite(value: Any) -> bool:
    """True for real numbers that are finite and strictly positive."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


def parse_decimal(text: Any) -> float:
    """
    Parse operator-entered decimal text.

    Never raises: anything that is not a decimal number comes back as NaN,
    which downstream checks treat as "undefined".

    Args:
        text: String (or number) typed by the operator

    Returns:
        Parsed float, or NaN if the text is not a number
    """
    if isinstance(text, bool):
        return math.nan
    if isinstance(text, numbers.Real):
        return float(text)
    if not isinstance(text, str):
        return math.nan

    # A single decimal comma is accepted ("2,5"); text that reads as a
    # thousands separator ("1,000", "1,000.5", "1,2,3") is rejected
    cleaned = text.strip()
    if cleaned.count(",") > 1 or ("," in cleaned and "." in cleaned):
        return math.nan
    if _THOUSANDS_GROUP.match(cleaned):
        return math.nan
    cleaned = cleaned.replace(",", ".")
    if not cleaned:
        return math.nan
    try:
        return float(cleaned)
    except ValueError:
        return math.nan
