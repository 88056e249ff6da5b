"""
CSV export of simulated trajectories.
"""

from typing import List, Sequence, Union
from pathlib import Path
import csv
import logging

from pid_tuning.simulation.simulator import SimulationSample


logger = logging.getLogger(__name__)

COLUMNS = list(SimulationSample._fields)


def write_trajectory_csv(
    file_path: Union[str, Path],
    samples: Sequence[SimulationSample]
) -> Path:
    """
    Write a trajectory to CSV with header ``time,setpoint,process_value``.

    Args:
        file_path: Output file path; parent directories are created
        samples: Trajectory from the simulator

    Returns:
        Path of the written file
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=COLUMNS)
        writer.writeheader()
        writer.writerows(sample._asdict() for sample in samples)

    logger.info("Wrote %d samples to %s", len(samples), path)
    return path


def read_trajectory_csv(file_path: Union[str, Path]) -> List[SimulationSample]:
    """
    Read a trajectory written by :func:`write_trajectory_csv`.

    Raises:
        ValueError: If a required column is missing or a value is not numeric
    """
    path = Path(file_path)
    with open(path, newline='') as f:
        reader = csv.DictReader(f)
        missing = set(COLUMNS) - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"{path}: missing columns {', '.join(sorted(missing))}")
        return [
            SimulationSample(*(float(row[col]) for col in COLUMNS))
            for row in reader
        ]
