"""Core tuning and controller components."""

from pid_tuning.core.tuning_rules import (
    TuningRule,
    TuningInputs,
    ControllerGains,
    compute_gains,
    TUNING_TABLE,
)
from pid_tuning.core.pid_controller import DiscretePIDController, ControllerState

__all__ = [
    "TuningRule",
    "TuningInputs",
    "ControllerGains",
    "compute_gains",
    "TUNING_TABLE",
    "DiscretePIDController",
    "ControllerState",
]
