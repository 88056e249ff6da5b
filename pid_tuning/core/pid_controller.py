"""
Discrete-time PID controller used by the process simulator.

Features:
- Standard-form gains (Kp, Ti, Td) with a guarded "no integral action" Ti
- Integral anti-windup by clamping the accumulator
- Output saturation modelling an actuator with bounded authority
- Backward-difference derivative on error
"""

from typing import Optional, Tuple
from dataclasses import dataclass

from pid_tuning.core.tuning_rules import ControllerGains
from pid_tuning.utils.math_utils import clamp
from pid_tuning.utils.validators import validate_limits, validate_positive


DEFAULT_INTEGRAL_LIMITS: Tuple[float, float] = (-10.0, 10.0)
DEFAULT_OUTPUT_LIMITS: Tuple[float, float] = (0.0, 2.0)


@dataclass
class ControllerState:
    """Internal state of the PID controller for one simulation run."""
    last_error: float = 0.0
    integral_accumulator: float = 0.0

    # Diagnostics of the most recent update
    error: float = 0.0
    derivative: float = 0.0
    output_unsat: float = 0.0
    output: float = 0.0

    @property
    def saturated(self) -> bool:
        return self.output != self.output_unsat


class DiscretePIDController:
    """
    Fixed-step PID controller in standard form.

    Each call to :meth:`update` performs, in order: error, integral
    accumulation, integral clamp (only when Ti > 0), backward-difference
    derivative, gain evaluation, output sum, output clamp, and finally
    stores the error for the next derivative.

    Example:
        >>> gains = ControllerGains(kp=1.32, ti=10.0, td=2.5)
        >>> pid = DiscretePIDController(gains, sample_time=0.1)
        >>> u = pid.update(setpoint=1.0, measurement=0.0)
    """

    def __init__(
        self,
        gains: ControllerGains,
        sample_time: float = 0.1,
        integral_limits: Optional[Tuple[float, float]] = DEFAULT_INTEGRAL_LIMITS,
        output_limits: Optional[Tuple[float, float]] = DEFAULT_OUTPUT_LIMITS
    ):
        """
        Initialize PID controller.

        Args:
            gains: Controller gains
            sample_time: Fixed step between updates
            integral_limits: Clamp for the raw error accumulator (None disables)
            output_limits: Actuator saturation limits (None disables)
        """
        self._gains = gains
        self._dt = validate_positive(sample_time, "sample_time")
        self._integral_limits = (
            validate_limits(integral_limits, "integral_limits")
            if integral_limits is not None else None
        )
        self._output_limits = (
            validate_limits(output_limits, "output_limits")
            if output_limits is not None else None
        )
        self._state = ControllerState()

    @property
    def gains(self) -> ControllerGains:
        return self._gains

    @property
    def sample_time(self) -> float:
        return self._dt

    @property
    def state(self) -> ControllerState:
        """Get current state."""
        return self._state

    @property
    def integral(self) -> float:
        """Get current integral accumulator."""
        return self._state.integral_accumulator

    @property
    def output(self) -> float:
        return self._state.output

    def update(self, setpoint: float, measurement: float) -> float:
        """
        Advance the controller by one step.

        Args:
            setpoint: Desired value
            measurement: Current process value

        Returns:
            Saturated controller output
        """
        state = self._state
        gains = self._gains
        dt = self._dt

        error = setpoint - measurement

        state.integral_accumulator += error * dt
        if gains.ti > 0 and self._integral_limits is not None:
            low, high = self._integral_limits
            state.integral_accumulator = clamp(state.integral_accumulator, low, high)

        derivative = (error - state.last_error) / dt

        ki = gains.ki
        kd = gains.kd

        output_unsat = gains.kp * error + ki * state.integral_accumulator + kd * derivative
        output = output_unsat
        if self._output_limits is not None:
            output = clamp(output_unsat, *self._output_limits)

        state.error = error
        state.derivative = derivative
        state.output_unsat = output_unsat
        state.output = output
        state.last_error = error

        return output

    def reset(self) -> None:
        """Reset controller state."""
        self._state = ControllerState()

    def __repr__(self) -> str:
        return f"DiscretePIDController({self._gains}, Ts={self._dt})"
