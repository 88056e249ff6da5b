"""
Unit tests for the discrete PID controller.
"""

import math
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_tuning.core.pid_controller import DiscretePIDController
from pid_tuning.core.tuning_rules import ControllerGains
from pid_tuning.utils.validators import ValidationError


class TestDiscretePIDController:
    """Test suite for DiscretePIDController class."""

    def test_initialization(self):
        """Test initialization with gains."""
        gains = ControllerGains(kp=2.0, ti=5.0, td=0.5)
        pid = DiscretePIDController(gains, sample_time=0.1)
        assert pid.gains == gains
        assert pid.sample_time == 0.1
        assert pid.integral == 0.0
        assert pid.output == 0.0

    def test_proportional_only(self):
        """Test P-only controller with infinite Ti."""
        gains = ControllerGains(kp=2.0, ti=math.inf, td=0.0)
        pid = DiscretePIDController(gains, output_limits=None)

        # error = 1, P term = 2.0 * 1 = 2.0
        output = pid.update(setpoint=1.0, measurement=0.0)
        assert output == pytest.approx(2.0)
        assert not math.isnan(output)

    def test_integral_accumulates_raw_error(self):
        """Accumulator integrates error*dt, independent of the gains."""
        gains = ControllerGains(kp=1.0, ti=1.0)
        pid = DiscretePIDController(
            gains, sample_time=0.1, integral_limits=None, output_limits=None
        )

        for _ in range(10):
            pid.update(setpoint=1.0, measurement=0.0)

        assert pid.integral == pytest.approx(1.0)

    def test_anti_windup_clamp(self):
        """Accumulator is held inside the integral limits."""
        gains = ControllerGains(kp=1.0, ti=10.0)
        pid = DiscretePIDController(gains, sample_time=0.1)

        for _ in range(1000):
            pid.update(setpoint=100.0, measurement=0.0)
            assert -10.0 <= pid.integral <= 10.0

        assert pid.integral == 10.0

        for _ in range(1000):
            pid.update(setpoint=-100.0, measurement=0.0)

        assert pid.integral == -10.0

    def test_infinite_ti_still_clamps_without_effect(self):
        """With Ti=inf the accumulator is clamped but contributes nothing."""
        gains = ControllerGains(kp=0.5, ti=math.inf)
        pid = DiscretePIDController(gains, sample_time=0.1, output_limits=None)

        for _ in range(500):
            output = pid.update(setpoint=1.0, measurement=0.0)

        assert pid.integral == 10.0
        assert output == pytest.approx(0.5)

    def test_zero_ti_skips_clamp(self):
        """Ti=0 disables both integral action and the clamp."""
        gains = ControllerGains(kp=1.0, ti=0.0)
        pid = DiscretePIDController(gains, sample_time=0.1, output_limits=None)

        for _ in range(200):
            output = pid.update(setpoint=1.0, measurement=0.0)

        assert pid.integral == pytest.approx(20.0)
        assert output == pytest.approx(1.0)

    def test_output_saturation(self):
        """Test output saturation limits."""
        gains = ControllerGains(kp=10.0)
        pid = DiscretePIDController(gains, output_limits=(0.0, 2.0))

        output = pid.update(setpoint=100.0, measurement=0.0)
        assert output == 2.0
        assert pid.state.saturated
        assert pid.state.output_unsat == pytest.approx(1000.0)

        output = pid.update(setpoint=0.0, measurement=100.0)
        assert output == 0.0

    def test_derivative_on_error(self):
        """Backward difference of error, starting from a zero last error."""
        gains = ControllerGains(kp=1.0, ti=math.inf, td=0.5)
        pid = DiscretePIDController(gains, sample_time=0.1, output_limits=None)

        # error 0 -> 1 over one step: derivative = 10, D term = 0.5 * 10
        output = pid.update(setpoint=1.0, measurement=0.0)
        assert pid.state.derivative == pytest.approx(10.0)
        assert output == pytest.approx(1.0 + 5.0)

        # unchanged error: derivative vanishes
        output = pid.update(setpoint=1.0, measurement=0.0)
        assert pid.state.derivative == 0.0
        assert output == pytest.approx(1.0)

    def test_last_error_updated_after_derivative(self):
        gains = ControllerGains(kp=1.0, ti=10.0, td=1.0)
        pid = DiscretePIDController(gains, sample_time=0.1)

        pid.update(setpoint=1.0, measurement=0.25)
        assert pid.state.last_error == pytest.approx(0.75)

    def test_full_pid_output(self):
        """u = Kp*e + Ki*I + Kd*de/dt before saturation."""
        gains = ControllerGains(kp=1.32, ti=10.0, td=2.5)
        pid = DiscretePIDController(gains, sample_time=0.1)

        output = pid.update(setpoint=1.0, measurement=0.0)

        expected = 1.32 * 1.0 + 0.132 * 0.1 + 3.3 * 10.0
        assert pid.state.output_unsat == pytest.approx(expected)
        assert output == 2.0

    def test_reset(self):
        """Test controller reset."""
        gains = ControllerGains(kp=1.0, ti=1.0)
        pid = DiscretePIDController(gains, sample_time=0.1)

        for _ in range(10):
            pid.update(setpoint=1.0, measurement=0.0)

        assert pid.integral > 0

        pid.reset()

        assert pid.integral == 0.0
        assert pid.output == 0.0
        assert pid.state.last_error == 0.0

    def test_invalid_sample_time(self):
        with pytest.raises(ValidationError):
            DiscretePIDController(ControllerGains(kp=1.0), sample_time=0.0)

    def test_invalid_limits(self):
        with pytest.raises(ValidationError):
            DiscretePIDController(ControllerGains(kp=1.0), output_limits=(2.0, 0.0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
