"""Trajectory analysis and reporting components."""

from pid_tuning.analyzer.metrics import TrajectoryMetrics
from pid_tuning.analyzer.report import build_tuning_prompt, format_gains, generate_report

__all__ = [
    "TrajectoryMetrics",
    "build_tuning_prompt",
    "format_gains",
    "generate_report",
]
