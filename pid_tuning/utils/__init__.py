"""Utility functions and helpers."""

from pid_tuning.utils.validators import (
    ValidationError,
    validate_positive,
    validate_non_negative,
    validate_range,
    validate_limits,
    is_positive_finite,
    parse_decimal,
)
from pid_tuning.utils.math_utils import clamp, sample_count, time_window_mask

__all__ = [
    "ValidationError",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_limits",
    "is_positive_finite",
    "parse_decimal",
    "clamp",
    "sample_count",
    "time_window_mask",
]
