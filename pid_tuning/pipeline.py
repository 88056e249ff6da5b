"""
Inputs -> gains -> trajectory as one pure call.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pid_tuning.core.tuning_rules import ControllerGains, TuningInputs, compute_gains
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.simulator import SimulationSample, simulate


@dataclass(frozen=True)
class TuningOutcome:
    """Everything the calculator shows for one set of operator inputs."""
    inputs: TuningInputs
    gains: Optional[ControllerGains]
    trajectory: List[SimulationSample] = field(default_factory=list)

    @property
    def is_defined(self) -> bool:
        return self.gains is not None


def evaluate_inputs(
    inputs: TuningInputs,
    config: Optional[SimulationConfig] = None
) -> TuningOutcome:
    """
    Compute gains and trajectory for parsed inputs.

    Invalid measurements yield an outcome with ``gains=None`` and an empty
    trajectory instead of an exception.
    """
    gains = compute_gains(inputs)
    if gains is None:
        return TuningOutcome(inputs=inputs, gains=None, trajectory=[])
    return TuningOutcome(inputs=inputs, gains=gains, trajectory=simulate(gains, config))


def evaluate(
    ultimate_gain: Any,
    ultimate_period: Any,
    rule: Any,
    config: Optional[SimulationConfig] = None
) -> TuningOutcome:
    """
    Evaluate operator-entered text.

    Args:
        ultimate_gain: Ku as typed (e.g. ``"2.2"``)
        ultimate_period: Tu as typed (e.g. ``"20"``)
        rule: ``"P"``, ``"PI"``, ``"PID"`` or the ``"Z-N ..."`` labels
        config: Simulation settings (defaults if None)

    Raises:
        ValidationError: If ``rule`` is not a known tuning rule
    """
    return evaluate_inputs(TuningInputs.from_text(ultimate_gain, ultimate_period, rule), config)
