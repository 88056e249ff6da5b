"""
PID Tuning Calculator
=====================

Ziegler-Nichols tuning and closed-loop simulation for instrument technicians:
- Controller settings from ultimate gain and period (P, PI, PID rules)
- Fixed-step simulation against a two-lag reference process
- Anti-windup and actuator saturation
- Response metrics, reports and charts
- Named configuration storage
"""

from pid_tuning.core.tuning_rules import (
    TuningRule,
    TuningInputs,
    ControllerGains,
    compute_gains,
)
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.simulator import (
    ProcessSimulator,
    SimulationSample,
    simulate,
)
from pid_tuning.pipeline import TuningOutcome, evaluate
from pid_tuning.storage.config_store import ConfigurationStore

__version__ = "1.0.0"
__all__ = [
    "TuningRule",
    "TuningInputs",
    "ControllerGains",
    "compute_gains",
    "SimulationConfig",
    "ProcessSimulator",
    "SimulationSample",
    "simulate",
    "TuningOutcome",
    "evaluate",
    "ConfigurationStore",
]
