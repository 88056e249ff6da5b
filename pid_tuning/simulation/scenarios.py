"""
Setpoint profiles for closed-loop simulation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StepScenario:
    """
    Delayed step setpoint.

    The setpoint holds ``initial`` until ``step_time`` and ``final`` from
    then on, so startup transients stay separate from the step response.
    """
    step_time: float = 1.0
    initial: float = 0.0
    final: float = 1.0

    def get_setpoint(self, t: float) -> float:
        """
        Get setpoint value at time t.

        Args:
            t: Current time

        Returns:
            Setpoint value
        """
        if t < self.step_time:
            return self.initial
        return self.final
