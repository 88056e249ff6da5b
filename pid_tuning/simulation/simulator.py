"""
Closed-loop process simulation.

Runs a discrete PID controller against the reference two-lag plant and
records a trajectory suitable for plotting.
"""

from typing import Dict, Any, List, NamedTuple, Optional
from dataclasses import dataclass, field
import logging
import math
import numpy as np

from pid_tuning.core.pid_controller import DiscretePIDController
from pid_tuning.core.tuning_rules import ControllerGains
from pid_tuning.plants.second_order import TwoLagPlant
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.utils.validators import ValidationError


logger = logging.getLogger(__name__)


class SimulationSample(NamedTuple):
    """One trajectory point, captured at the start of its interval."""
    time: float
    setpoint: float
    process_value: float


@dataclass
class SimulationResult:
    """Container for simulation results."""
    samples: List[SimulationSample]
    gains: ControllerGains
    config: SimulationConfig

    # Per-step diagnostics, aligned with samples
    outputs: np.ndarray = field(default_factory=lambda: np.zeros(0))
    integrals: np.ndarray = field(default_factory=lambda: np.zeros(0))
    errors: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def timestamps(self) -> np.ndarray:
        return np.array([s.time for s in self.samples], dtype=float)

    @property
    def setpoints(self) -> np.ndarray:
        return np.array([s.setpoint for s in self.samples], dtype=float)

    @property
    def process_values(self) -> np.ndarray:
        return np.array([s.process_value for s in self.samples], dtype=float)

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Convert to dictionary format."""
        return {
            'time': self.timestamps,
            'setpoint': self.setpoints,
            'process_value': self.process_values,
            'output': self.outputs,
            'integral': self.integrals,
            'error': self.errors,
        }


def _check_gains(gains: ControllerGains) -> None:
    """Reject gains that would let NaN into the loop."""
    for name in ('kp', 'ti', 'td'):
        value = getattr(gains, name)
        if math.isnan(value) or value < 0:
            raise ValidationError(f"{name} must be a non-negative number, got {value}")
    if math.isinf(gains.kp) or math.isinf(gains.td):
        raise ValidationError("kp and td must be finite")
    if not math.isfinite(gains.kd):
        raise ValidationError(f"kd = kp*td overflows for {gains}")


class ProcessSimulator:
    """
    Fixed-step closed-loop simulator.

    Every run starts the controller and plant from rest; nothing carries
    over between runs, so identical gains give identical trajectories.

    Example:
        >>> sim = ProcessSimulator()
        >>> result = sim.run(ControllerGains(kp=1.32, ti=10.0, td=2.5))
        >>> result.samples[0]
        SimulationSample(time=0.0, setpoint=0.0, process_value=0.0)
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        """
        Initialize simulator.

        Args:
            config: Simulation settings (defaults if None)
        """
        self._config = config or SimulationConfig()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    def run(self, gains: ControllerGains) -> SimulationResult:
        """
        Simulate the closed loop for the given gains.

        Args:
            gains: Controller gains

        Returns:
            SimulationResult; empty when ``gains.kp == 0``

        Raises:
            ValidationError: If the gains contain NaN, negative or infinite
                Kp/Td values, or Kp*Td overflows
        """
        config = self._config
        _check_gains(gains)

        if gains.is_disabled:
            logger.debug("Kp is zero, controller disabled; returning empty trajectory")
            return SimulationResult(samples=[], gains=gains, config=config)

        dt = config.sample_time
        n_steps = config.n_samples
        scenario = config.scenario

        controller = DiscretePIDController(
            gains,
            sample_time=dt,
            integral_limits=config.integral_limits,
            output_limits=config.output_limits,
        )
        plant = TwoLagPlant(config.plant, sample_time=dt)

        samples: List[SimulationSample] = []
        outputs = np.zeros(n_steps)
        integrals = np.zeros(n_steps)
        errors = np.zeros(n_steps)

        measurement = plant.output

        for i in range(n_steps):
            t = i * dt
            setpoint = scenario.get_setpoint(t)

            # Sample reflects the state at the start of the interval
            samples.append(SimulationSample(t, setpoint, measurement))

            output = controller.update(setpoint, measurement)
            measurement = plant.update(output)

            state = controller.state
            outputs[i] = output
            integrals[i] = state.integral_accumulator
            errors[i] = state.error

        logger.debug(
            "Simulated %d steps with %s, final process value %.6f",
            n_steps, gains, samples[-1].process_value
        )

        return SimulationResult(
            samples=samples,
            gains=gains,
            config=config,
            outputs=outputs,
            integrals=integrals,
            errors=errors,
        )


def simulate(
    gains: ControllerGains,
    config: Optional[SimulationConfig] = None
) -> List[SimulationSample]:
    """
    Simulate the reference loop and return only the trajectory.

    Args:
        gains: Controller gains
        config: Simulation settings (defaults if None)

    Returns:
        List of SimulationSample; empty when ``gains.kp == 0``
    """
    return ProcessSimulator(config).run(gains).samples
