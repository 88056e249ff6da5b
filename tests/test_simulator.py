"""
Tests for the closed-loop process simulator and the tuning pipeline.
"""

import math
import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_tuning.core.tuning_rules import ControllerGains, TuningInputs, TuningRule, compute_gains
from pid_tuning.pipeline import evaluate
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.simulator import ProcessSimulator, SimulationSample, simulate
from pid_tuning.utils.validators import ValidationError


PID_GAINS = ControllerGains(kp=1.32, ti=10.0, td=2.5)
P_GAINS = ControllerGains(kp=1.1, ti=math.inf, td=0.0)


class TestTrajectoryShape:
    """Length, time axis and setpoint profile."""

    def test_length(self):
        """1001 samples for the default 100 / 0.1 horizon."""
        assert len(simulate(PID_GAINS)) == 1001

    def test_first_sample_at_rest(self):
        """First sample is recorded before any update."""
        samples = simulate(PID_GAINS)
        assert samples[0] == (0.0, 0.0, 0.0)
        assert isinstance(samples[0], SimulationSample)

    def test_time_axis(self):
        """Strictly increasing, evenly spaced, ending at total_time."""
        times = np.array([s.time for s in simulate(PID_GAINS)])
        assert np.all(np.diff(times) > 0)
        assert np.allclose(np.diff(times), 0.1)
        assert times[-1] == pytest.approx(100.0)

    def test_setpoint_step(self):
        """Setpoint is 0 before t=1 and 1 from t=1 on."""
        samples = simulate(PID_GAINS)
        assert all(s.setpoint == 0.0 for s in samples if s.time < 1.0 - 1e-9)
        assert all(s.setpoint == 1.0 for s in samples if s.time >= 1.0 - 1e-9)
        assert samples[9].setpoint == 0.0
        assert samples[10].setpoint == 1.0

    def test_process_at_rest_until_step(self):
        """No control action while the setpoint is 0."""
        samples = simulate(PID_GAINS)
        assert all(s.process_value == 0.0 for s in samples[:11])

    def test_sampling_before_update(self):
        """The first response shows up one step after the setpoint change."""
        result = ProcessSimulator().run(PID_GAINS)

        # Step at i=10 saturates the output at 2: acc=0.2, rate=0.02, pv=0.002
        assert result.outputs[9] == 0.0
        assert result.outputs[10] == 2.0
        assert result.samples[10].process_value == 0.0
        assert result.samples[11].process_value == pytest.approx(0.002)

    def test_custom_horizon(self):
        """Length follows floor(total_time / sample_time) + 1."""
        config = SimulationConfig(total_time=10.0)
        assert len(simulate(PID_GAINS, config)) == 101

        config = SimulationConfig(total_time=10.05)
        assert len(simulate(PID_GAINS, config)) == 101


class TestDegenerateAndInvalid:
    """Disabled controller and precondition enforcement."""

    def test_zero_kp_gives_empty_trajectory(self):
        assert simulate(ControllerGains(kp=0.0, ti=0.0, td=0.0)) == []

    def test_disabled_result_is_empty(self):
        result = ProcessSimulator().run(ControllerGains.disabled())
        assert result.is_empty
        assert len(result) == 0

    def test_infinite_kp_rejected(self):
        with pytest.raises(ValidationError):
            simulate(ControllerGains(kp=math.inf))

    def test_nan_gains_rejected(self):
        with pytest.raises(ValidationError):
            simulate(ControllerGains(kp=math.nan))

    def test_overflowing_kd_rejected(self):
        """Finite Kp and Td whose product overflows never reach the loop."""
        with pytest.raises(ValidationError):
            simulate(ControllerGains(kp=6e159, ti=5e159, td=1.25e159))


class TestDynamics:
    """Closed-loop behaviour of the reference scenarios."""

    def test_p_rule_has_no_nan(self):
        """Infinite Ti never produces NaN."""
        gains = compute_gains(TuningInputs(2.2, 20.0, TuningRule.P))
        result = ProcessSimulator().run(gains)
        values = np.array(result.samples)
        assert not np.any(np.isnan(values))
        assert not np.any(np.isnan(result.outputs))

    def test_pid_converges(self):
        """Z-N PID on Ku=2.2, Tu=20 reaches the setpoint within 5% by t=100."""
        gains = compute_gains(TuningInputs.from_text("2.2", "20", "Z-N PID"))
        samples = simulate(gains)
        assert samples[-1].time == pytest.approx(100.0)
        assert samples[-1].process_value == pytest.approx(1.0, abs=0.05)

    def test_p_only_offset(self):
        """P-only control leaves a steady-state error of 1 / (1 + Kp)."""
        gains = compute_gains(TuningInputs.from_text("2.2", "20", "Z-N P"))
        samples = simulate(gains)
        final = samples[-1].process_value
        assert abs(1.0 - final) > 0.05
        assert final == pytest.approx(1.1 / 2.1, abs=1e-3)

    def test_anti_windup_bounds_integral(self):
        """Huge Ku keeps the accumulator inside [-10, 10] at every step."""
        gains = compute_gains(TuningInputs(100.0, 20.0, TuningRule.PID))
        result = ProcessSimulator().run(gains)
        assert np.all(result.integrals <= 10.0)
        assert np.all(result.integrals >= -10.0)

    def test_output_clamped(self):
        """Controller output stays inside the actuator limits."""
        gains = compute_gains(TuningInputs(100.0, 20.0, TuningRule.PID))
        result = ProcessSimulator().run(gains)
        assert np.all(result.outputs >= 0.0)
        assert np.all(result.outputs <= 2.0)

    def test_custom_limits(self):
        """Limits come from the configuration."""
        config = SimulationConfig(output_limits=(0.0, 1.5), integral_limits=(-1.0, 1.0))
        result = ProcessSimulator(config).run(PID_GAINS)
        assert result.outputs.max() <= 1.5
        assert np.all(np.abs(result.integrals) <= 1.0)

    def test_idempotent(self):
        """Identical gains give identical trajectories."""
        assert simulate(PID_GAINS) == simulate(PID_GAINS)
        assert simulate(P_GAINS) == simulate(P_GAINS)

    def test_no_state_carried_between_runs(self):
        sim = ProcessSimulator()
        first = sim.run(PID_GAINS).samples
        sim.run(ControllerGains(kp=5.0, ti=1.0, td=0.1))
        assert sim.run(PID_GAINS).samples == first


class TestSimulationResult:
    """Diagnostics container."""

    def test_arrays_aligned(self):
        result = ProcessSimulator().run(PID_GAINS)
        data = result.to_dict()
        for key in ('time', 'setpoint', 'process_value', 'output', 'integral', 'error'):
            assert len(data[key]) == 1001
        assert result.gains == PID_GAINS


class TestPipeline:
    """Inputs -> gains -> trajectory."""

    def test_evaluate_valid(self):
        outcome = evaluate("2.2", "20", "Z-N PID")
        assert outcome.is_defined
        assert outcome.gains.kp == pytest.approx(1.32)
        assert len(outcome.trajectory) == 1001

    @pytest.mark.parametrize("ku,tu", [("", "20"), ("abc", "20"), ("-1", "20"), ("2.2", "0")])
    def test_evaluate_invalid_is_idle(self, ku, tu):
        outcome = evaluate(ku, tu, "PID")
        assert not outcome.is_defined
        assert outcome.gains is None
        assert outcome.trajectory == []

    @pytest.mark.parametrize("ku,tu", [("1e160", "1e160"), ("1e200", "1e200")])
    def test_overflowing_inputs_are_idle(self, ku, tu):
        """Gains that overflow are undefined rather than a NaN trajectory."""
        outcome = evaluate(ku, tu, "PID")
        assert not outcome.is_defined
        assert outcome.trajectory == []

    def test_evaluate_unknown_rule(self):
        with pytest.raises(ValidationError):
            evaluate("2.2", "20", "Z-N PD")


class TestSimulationConfig:
    """Configuration layer."""

    def test_defaults(self):
        config = SimulationConfig()
        assert config.sample_time == 0.1
        assert config.total_time == 100.0
        assert config.n_samples == 1001
        assert config.integral_limits == (-10.0, 10.0)
        assert config.output_limits == (0.0, 2.0)

    @pytest.mark.parametrize("kwargs", [
        {'sample_time': 0.0},
        {'total_time': -1.0},
        {'sample_time': 2.0, 'total_time': 1.0},
        {'output_limits': (2.0, 0.0)},
        {'integral_limits': (5.0, 5.0)},
        {'setpoint_time': -1.0},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValidationError):
            SimulationConfig(**kwargs)

    def test_json_roundtrip(self):
        config = SimulationConfig(total_time=50.0, output_limits=(0.0, 3.0))
        assert SimulationConfig.from_json(config.to_json()) == config

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            SimulationConfig.from_dict({'dt': 0.1})

    def test_copy(self):
        config = SimulationConfig().copy(total_time=20.0)
        assert config.n_samples == 201
        assert config.sample_time == 0.1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
