"""
Tests for trajectory CSV export.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_tuning.core.tuning_rules import ControllerGains
from pid_tuning.export.csv_export import read_trajectory_csv, write_trajectory_csv
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.simulator import simulate


class TestTrajectoryCsv:
    """Test suite for CSV export."""

    def test_header(self, tmp_path):
        samples = simulate(ControllerGains(kp=1.32, ti=10.0, td=2.5), SimulationConfig(total_time=5.0))
        path = write_trajectory_csv(tmp_path / "out" / "response.csv", samples)

        lines = path.read_text().splitlines()
        assert lines[0] == "time,setpoint,process_value"
        assert len(lines) == 1 + 51

    def test_read_back(self, tmp_path):
        samples = simulate(ControllerGains(kp=1.32, ti=10.0, td=2.5), SimulationConfig(total_time=5.0))
        path = write_trajectory_csv(tmp_path / "response.csv", samples)

        restored = read_trajectory_csv(path)
        assert len(restored) == len(samples)
        assert restored[-1].process_value == pytest.approx(samples[-1].process_value)

    def test_empty_trajectory(self, tmp_path):
        path = write_trajectory_csv(tmp_path / "empty.csv", [])
        assert path.read_text().strip() == "time,setpoint,process_value"
        assert read_trajectory_csv(path) == []

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("time,setpoint\n0,0\n")
        with pytest.raises(ValueError, match="process_value"):
            read_trajectory_csv(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
