"""Trajectory export."""

from pid_tuning.export.csv_export import write_trajectory_csv, read_trajectory_csv

__all__ = [
    "write_trajectory_csv",
    "read_trajectory_csv",
]
