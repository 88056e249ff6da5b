"""
Mathematical utility functions for controller simulation.
"""

from typing import Optional, Tuple
import math
import numpy as np


def clamp(value: float, min_val: Optional[float], max_val: Optional[float]) -> float:
    """Clamp a value between minimum and maximum bounds."""
    if min_val is not None and value < min_val:
        return min_val
    if max_val is not None and value > max_val:
        return max_val
    return value


def sample_count(total_time: float, sample_time: float) -> int:
    """
    Number of samples on ``[0, total_time]`` at a fixed step, both ends included.

    Equals ``floor(total_time / sample_time) + 1``; the small epsilon absorbs
    binary rounding such as ``0.3 / 0.1 == 2.9999999999999996``.
    """
    if sample_time <= 0:
        raise ValueError("sample_time must be positive")
    return int(math.floor(total_time / sample_time + 1e-9)) + 1


def time_window_mask(times: np.ndarray, bounds: Tuple[float, float]) -> np.ndarray:
    """Boolean mask of ``times`` inside ``bounds`` (given in either order)."""
    low, high = min(bounds), max(bounds)
    return (times >= low) & (times <= high)


def integrate_abs(values: np.ndarray, dt: float) -> float:
    """Rectangle-rule integral of ``|values|`` at a fixed step."""
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        return 0.0
    return float(np.sum(np.abs(arr)) * dt)
