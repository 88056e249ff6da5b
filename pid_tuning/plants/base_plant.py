"""
Interface shared by process models the simulator can drive.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from pid_tuning.utils.validators import validate_positive


class BasePlant(ABC):
    """
    Fixed-step process model.

    Subclasses advance their own state in :meth:`update` and keep
    ``_output`` and ``_time`` current so the accessors here stay valid.
    """

    def __init__(self, sample_time: float = 0.1):
        self._dt = validate_positive(sample_time, "sample_time")
        self._output: float = 0.0
        self._time: float = 0.0

    @abstractmethod
    def update(self, control_input: float) -> float:
        """
        Integrate one step under a constant controller output.

        Args:
            control_input: Saturated controller output for this step

        Returns:
            Process value at the end of the step
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        pass

    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Model type and constants."""
        pass

    @property
    def output(self) -> float:
        return self._output

    @property
    def sample_time(self) -> float:
        return self._dt

    @property
    def time(self) -> float:
        """Elapsed model time."""
        return self._time
