"""
Second-order reference process with two time constants.
Differential equation: Tp1*Tp2*y'' + (Tp1 + Tp2)*y' + y = K*u
"""

from typing import Dict, Any
from dataclasses import dataclass, asdict

from pid_tuning.plants.base_plant import BasePlant
from pid_tuning.utils.validators import validate_positive, validate_range


@dataclass(frozen=True)
class PlantParameters:
    """Constants of the reference process."""
    gain: float = 1.0
    tp1: float = 5.0
    tp2: float = 2.0

    def __post_init__(self):
        validate_range(self.gain, "gain")
        validate_positive(self.tp1, "tp1")
        validate_positive(self.tp2, "tp2")

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class TwoLagPlant(BasePlant):
    """
    Overdamped second-order process (two first-order lags in series).

    Transfer function: G(s) = K / ((Tp1*s + 1)(Tp2*s + 1))

    State-space representation:
        dy/dt = r
        dr/dt = (K*u - (Tp1 + Tp2)*r - y) / (Tp1*Tp2)

    Integrated with explicit Euler: the rate is advanced first and the new
    rate is used to advance the output.

    Example:
        >>> plant = TwoLagPlant(PlantParameters(), sample_time=0.1)
        >>> y = plant.update(1.0)
    """

    def __init__(
        self,
        params: PlantParameters = PlantParameters(),
        sample_time: float = 0.1,
        initial_output: float = 0.0,
        initial_rate: float = 0.0
    ):
        """
        Initialize plant.

        Args:
            params: Gain and time constants
            sample_time: Integration step
            initial_output: Initial process value
            initial_rate: Initial rate of change of the process value
        """
        super().__init__(sample_time)

        self._params = params
        self._initial_output = initial_output
        self._initial_rate = initial_rate

        self._rate = initial_rate
        self._output = initial_output

    def update(self, control_input: float) -> float:
        """
        Advance one explicit-Euler step.

        Args:
            control_input: Actuator signal u

        Returns:
            New process value
        """
        p = self._params
        dt = self._dt

        acceleration = (
            p.gain * control_input - (p.tp1 + p.tp2) * self._rate - self._output
        ) / (p.tp1 * p.tp2)
        self._rate += acceleration * dt
        self._output += self._rate * dt
        self._time += dt

        return self._output

    def reset(self) -> None:
        """Reset plant to initial state."""
        self._rate = self._initial_rate
        self._output = self._initial_output
        self._time = 0.0

    def get_info(self) -> Dict[str, Any]:
        """Get plant parameters."""
        return {
            'type': 'TwoLagPlant',
            'gain': self._params.gain,
            'tp1': self._params.tp1,
            'tp2': self._params.tp2,
            'sample_time': self._dt,
        }

    @property
    def rate(self) -> float:
        """Current rate of change (dy/dt)."""
        return self._rate

    @property
    def steady_state_gain(self) -> float:
        return self._params.gain
