"""
Step response metrics for simulated trajectories.
Uses numpy for vectorized calculations.
"""

from typing import Optional, Sequence
from dataclasses import dataclass
import numpy as np

from pid_tuning.simulation.simulator import SimulationSample
from pid_tuning.utils.math_utils import integrate_abs


@dataclass(frozen=True)
class TrajectoryMetrics:
    """
    Step response metrics measured from the setpoint step onwards.

    ``rise_time`` and ``settling_time`` are None when the response never
    reaches the 90% level or never stays inside the tolerance band.
    """
    step_time: float
    final_setpoint: float
    final_value: float
    steady_state_error: float
    overshoot_percent: float
    peak_time: float
    peak_value: float
    rise_time: Optional[float]
    settling_time: Optional[float]
    iae: float
    tolerance: float
    converged: bool

    @classmethod
    def from_samples(
        cls,
        samples: Sequence[SimulationSample],
        tolerance: float = 0.05
    ) -> 'TrajectoryMetrics':
        """
        Calculate metrics for a trajectory.

        Args:
            samples: Trajectory from the simulator
            tolerance: Band, as a fraction of the step size, used for
                settling time and convergence

        Returns:
            TrajectoryMetrics

        Raises:
            ValueError: If the trajectory has fewer than 2 samples
        """
        if len(samples) < 2:
            raise ValueError("Need at least 2 data points")
        if not 0 < tolerance < 1:
            raise ValueError("tolerance must be in (0, 1)")

        data = np.asarray(samples, dtype=float)
        timestamps, setpoints, measurements = data[:, 0], data[:, 1], data[:, 2]
        dt = float(timestamps[1] - timestamps[0])

        final_setpoint = float(setpoints[-1])
        changed = np.nonzero(setpoints != setpoints[0])[0]
        step_idx = int(changed[0]) if len(changed) else 0
        step_time = float(timestamps[step_idx])

        t = timestamps[step_idx:]
        y = measurements[step_idx:]
        y0 = float(y[0])
        delta = final_setpoint - y0

        step_size = abs(final_setpoint - float(setpoints[0]))
        reference = step_size if step_size > 1e-12 else 1.0
        band = tolerance * reference

        final_value = float(measurements[-1])
        steady_state_error = final_setpoint - final_value

        if delta >= 0:
            peak_idx = int(np.argmax(y))
        else:
            peak_idx = int(np.argmin(y))
        peak_value = float(y[peak_idx])
        overshoot = 0.0
        if abs(delta) > 1e-12:
            overshoot = max(0.0, (peak_value - final_setpoint) / delta * 100.0)

        rise_time = None
        if abs(delta) > 1e-12:
            y_norm = (y - y0) / delta
            above_10 = np.nonzero(y_norm >= 0.1)[0]
            above_90 = np.nonzero(y_norm >= 0.9)[0]
            if len(above_10) and len(above_90):
                rise_time = float(t[above_90[0]] - t[above_10[0]])

        outside = np.nonzero(np.abs(y - final_setpoint) > band)[0]
        if len(outside) == 0:
            settling_time = 0.0
        elif outside[-1] == len(y) - 1:
            settling_time = None
        else:
            settling_time = float(t[outside[-1] + 1] - step_time)

        return cls(
            step_time=step_time,
            final_setpoint=final_setpoint,
            final_value=final_value,
            steady_state_error=steady_state_error,
            overshoot_percent=overshoot,
            peak_time=float(t[peak_idx]),
            peak_value=peak_value,
            rise_time=rise_time,
            settling_time=settling_time,
            iae=integrate_abs(setpoints[step_idx:] - y, dt),
            tolerance=tolerance,
            converged=abs(steady_state_error) <= band,
        )
