"""
Ziegler-Nichols closed-loop tuning rules.

Maps the ultimate gain Ku and ultimate period Tu measured in a
sustained-oscillation experiment to controller settings (Kp, Ti, Td).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum
import math

from pid_tuning.utils.validators import (
    ValidationError,
    is_positive_finite,
    parse_decimal,
    validate_non_negative,
)


class TuningRule(Enum):
    """Controller structure selected by the operator."""
    P = "P"
    PI = "PI"
    PID = "PID"

    @property
    def label(self) -> str:
        """Operator-facing name, e.g. ``Z-N PID``."""
        return f"Z-N {self.value}"

    @classmethod
    def parse(cls, value: Any) -> 'TuningRule':
        """
        Resolve a rule from an enum member, ``"PID"`` or ``"Z-N PID"``.

        Raises:
            ValidationError: If the value names no known rule
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace(" ", "")
            if key.startswith("Z-N"):
                key = key[3:]
            elif key.startswith("ZN"):
                key = key[2:]
            for rule in cls:
                if rule.value == key:
                    return rule
        raise ValidationError(f"Unknown tuning rule: {value!r}")


# (Kp factor on Ku, Ti divisor on Tu, Td divisor on Tu); None = term disabled
TUNING_TABLE: Dict[TuningRule, tuple] = {
    TuningRule.P: (0.5, None, None),
    TuningRule.PI: (0.45, 1.2, None),
    TuningRule.PID: (0.6, 2.0, 8.0),
}


@dataclass(frozen=True)
class TuningInputs:
    """
    Operator inputs for a tuning calculation.

    Values are stored as entered; NaN marks text that did not parse.
    Validity is decided by :func:`compute_gains`, not here.
    """
    ultimate_gain: float
    ultimate_period: float
    rule: TuningRule = TuningRule.PID

    def __post_init__(self):
        object.__setattr__(self, 'rule', TuningRule.parse(self.rule))

    @classmethod
    def from_text(cls, ultimate_gain: Any, ultimate_period: Any, rule: Any) -> 'TuningInputs':
        """Build inputs from form text; bad numbers become NaN."""
        return cls(
            ultimate_gain=parse_decimal(ultimate_gain),
            ultimate_period=parse_decimal(ultimate_period),
            rule=TuningRule.parse(rule),
        )

    @property
    def is_valid(self) -> bool:
        """True when both measurements are finite and positive."""
        return is_positive_finite(self.ultimate_gain) and is_positive_finite(self.ultimate_period)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ultimate_gain': self.ultimate_gain,
            'ultimate_period': self.ultimate_period,
            'rule': self.rule.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TuningInputs':
        return cls(
            ultimate_gain=parse_decimal(data.get('ultimate_gain')),
            ultimate_period=parse_decimal(data.get('ultimate_period')),
            rule=TuningRule.parse(data.get('rule')),
        )


@dataclass(frozen=True)
class ControllerGains:
    """
    Controller settings in standard (ISA) form.

    ``ti`` may be ``math.inf``, meaning no integral action. The derived
    ``ki`` is guarded explicitly so it is exactly ``0.0`` in that case.
    """
    kp: float
    ti: float = math.inf
    td: float = 0.0

    def __post_init__(self):
        validate_non_negative(self.kp, "kp")
        validate_non_negative(self.ti, "ti")
        validate_non_negative(self.td, "td")

    @classmethod
    def disabled(cls) -> 'ControllerGains':
        """Idle value shown while inputs are invalid."""
        return cls(kp=0.0, ti=0.0, td=0.0)

    @property
    def has_integral_action(self) -> bool:
        return math.isfinite(self.ti) and self.ti > 0

    @property
    def ki(self) -> float:
        """Integral gain Kp/Ti; 0 when Ti is infinite or zero."""
        if not self.has_integral_action:
            return 0.0
        return self.kp / self.ti

    @property
    def kd(self) -> float:
        """Derivative gain Kp*Td."""
        return self.kp * self.td

    @property
    def is_disabled(self) -> bool:
        return self.kp == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kp': self.kp,
            'ti': self.ti if math.isfinite(self.ti) else None,
            'td': self.td,
        }

    def __str__(self) -> str:
        ti = f"{self.ti:.3f}" if math.isfinite(self.ti) else "inf"
        return f"ControllerGains(Kp={self.kp:.3f}, Ti={ti}, Td={self.td:.3f})"


def compute_gains(inputs: TuningInputs) -> Optional[ControllerGains]:
    """
    Derive controller gains with the Ziegler-Nichols ultimate-cycle rules.

    | rule | Kp      | Ti     | Td   |
    |------|---------|--------|------|
    | P    | 0.5 Ku  | inf    | 0    |
    | PI   | 0.45 Ku | Tu/1.2 | 0    |
    | PID  | 0.6 Ku  | Tu/2   | Tu/8 |

    Args:
        inputs: Ultimate gain, ultimate period and rule

    Returns:
        ControllerGains, or None when Ku or Tu is not a finite positive number
        or a derived gain overflows

    Raises:
        ValidationError: If ``inputs.rule`` is not a known rule
    """
    rule = TuningRule.parse(inputs.rule)
    if not inputs.is_valid:
        return None

    ku = float(inputs.ultimate_gain)
    tu = float(inputs.ultimate_period)
    kp_factor, ti_divisor, td_divisor = TUNING_TABLE[rule]

    kp = kp_factor * ku
    ti = tu / ti_divisor if ti_divisor is not None else math.inf
    td = tu / td_divisor if td_divisor is not None else 0.0

    # Huge measurements can overflow Kp*Td even though Ku and Tu are finite
    if not (math.isfinite(kp) and math.isfinite(td) and math.isfinite(kp * td)):
        return None
    if ti_divisor is not None and not math.isfinite(ti):
        return None

    return ControllerGains(kp=kp, ti=ti, td=td)
