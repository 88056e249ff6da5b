"""Simulation framework for the tuning calculator."""

from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.scenarios import StepScenario
from pid_tuning.simulation.simulator import (
    ProcessSimulator,
    SimulationResult,
    SimulationSample,
    simulate,
)
from pid_tuning.simulation.runner import LatestSimulationRunner

__all__ = [
    "SimulationConfig",
    "StepScenario",
    "ProcessSimulator",
    "SimulationResult",
    "SimulationSample",
    "simulate",
    "LatestSimulationRunner",
]
