"""
Simulation configuration.
Encapsulates timing, setpoint profile, limits and plant constants in a
validated, JSON-serializable structure.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Tuple
import json

from pid_tuning.core.pid_controller import DEFAULT_INTEGRAL_LIMITS, DEFAULT_OUTPUT_LIMITS
from pid_tuning.plants.second_order import PlantParameters
from pid_tuning.simulation.scenarios import StepScenario
from pid_tuning.utils.math_utils import sample_count
from pid_tuning.utils.validators import (
    ValidationError,
    validate_limits,
    validate_positive,
    validate_range,
)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Simulation settings.

    The anti-windup bound and actuator clamp are illustrative defaults
    carried over from the calculator, not limits derived from the plant.
    """

    # Timing
    sample_time: float = 0.1
    total_time: float = 100.0

    # Setpoint step
    setpoint_time: float = 1.0
    setpoint_initial: float = 0.0
    setpoint_final: float = 1.0

    # Limits
    integral_limits: Tuple[float, float] = DEFAULT_INTEGRAL_LIMITS
    output_limits: Tuple[float, float] = DEFAULT_OUTPUT_LIMITS

    plant: PlantParameters = field(default_factory=PlantParameters)

    def __post_init__(self):
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        validate_positive(self.sample_time, "sample_time")
        validate_positive(self.total_time, "total_time")
        if self.sample_time > self.total_time:
            raise ValidationError("sample_time must not exceed total_time")
        validate_range(self.setpoint_time, "setpoint_time", min_val=0.0)
        validate_range(self.setpoint_initial, "setpoint_initial")
        validate_range(self.setpoint_final, "setpoint_final")
        object.__setattr__(self, 'integral_limits',
                           validate_limits(self.integral_limits, "integral_limits"))
        object.__setattr__(self, 'output_limits',
                           validate_limits(self.output_limits, "output_limits"))
        if not isinstance(self.plant, PlantParameters):
            raise ValidationError("plant must be PlantParameters")

    @property
    def n_samples(self) -> int:
        """Trajectory length, ``floor(total_time / sample_time) + 1``."""
        return sample_count(self.total_time, self.sample_time)

    @property
    def scenario(self) -> StepScenario:
        return StepScenario(
            step_time=self.setpoint_time,
            initial=self.setpoint_initial,
            final=self.setpoint_final,
        )

    def copy(self, **changes) -> 'SimulationConfig':
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New SimulationConfig instance
        """
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'sample_time': self.sample_time,
            'total_time': self.total_time,
            'setpoint_time': self.setpoint_time,
            'setpoint_initial': self.setpoint_initial,
            'setpoint_final': self.setpoint_final,
            'integral_limits': list(self.integral_limits),
            'output_limits': list(self.output_limits),
            'plant': self.plant.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Create from dictionary.

        Unknown keys are rejected so typos in config files surface early.
        """
        data = dict(data)
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValidationError(f"Unknown simulation settings: {', '.join(sorted(unknown))}")

        if 'plant' in data and isinstance(data['plant'], dict):
            try:
                data['plant'] = PlantParameters(**data['plant'])
            except TypeError as e:
                raise ValidationError(f"Invalid plant settings: {e}") from e
        for key in ('integral_limits', 'output_limits'):
            if key in data and isinstance(data[key], list):
                data[key] = tuple(data[key])

        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'SimulationConfig':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))
