"""
Plotting utilities for simulated trajectories.
"""

from typing import List, Optional, Sequence, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from pid_tuning.simulation.simulator import SimulationSample
from pid_tuning.utils.math_utils import time_window_mask


def select_window(
    samples: Sequence[SimulationSample],
    x1: float,
    x2: float
) -> List[SimulationSample]:
    """
    Samples whose time lies between ``x1`` and ``x2`` (either order).

    The input trajectory is not modified.
    """
    if not samples:
        return []
    times = np.array([s.time for s in samples], dtype=float)
    mask = time_window_mask(times, (x1, x2))
    return [s for s, keep in zip(samples, mask) if keep]


class TrajectoryPlotter:
    """
    Response chart for the tuning calculator.

    Draws the setpoint as a step line and the process value as a curve.
    A time range narrows the visible x-axis (range-select zoom) without
    touching the data.
    """

    def __init__(self, style: str = 'seaborn-v0_8-whitegrid'):
        """
        Initialize plotter.

        Args:
            style: Matplotlib style to use
        """
        self._style = style if style in plt.style.available else 'default'

        self._colors = {
            'setpoint': '#82ca9d',
            'process_value': '#8884d8'
        }

    def plot_response(
        self,
        samples: Sequence[SimulationSample],
        title: str = "Process Response Simulation",
        time_range: Optional[Tuple[float, float]] = None,
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """
        Plot setpoint and process value against time.

        Args:
            samples: Trajectory from the simulator
            title: Plot title
            time_range: Optional (x1, x2) zoom window, either order
            figsize: Figure size

        Returns:
            Matplotlib Figure
        """
        with plt.style.context(self._style):
            fig, ax = plt.subplots(figsize=figsize)

            if samples:
                data = np.asarray(samples, dtype=float)
                ax.step(data[:, 0], data[:, 1], where='post', color=self._colors['setpoint'],
                        linewidth=2, label='Setpoint')
                ax.plot(data[:, 0], data[:, 2], '-', color=self._colors['process_value'],
                        linewidth=2, label='Process Variable')
                ax.legend(loc='lower right')
            else:
                ax.text(0.5, 0.5, 'No trajectory', ha='center', va='center',
                        transform=ax.transAxes)

            if time_range is not None:
                ax.set_xlim(min(time_range), max(time_range))

            ax.set_xlabel('Time (s)', fontsize=12)
            ax.set_ylabel('Value', fontsize=12)
            ax.set_title(title, fontsize=14, fontweight='bold')
            ax.grid(True, alpha=0.3)

            fig.tight_layout()
        return fig

    @staticmethod
    def save(fig: Figure, path: str, dpi: int = 150) -> None:
        """Save figure to file."""
        fig.savefig(path, dpi=dpi, bbox_inches='tight')

    @staticmethod
    def close(fig: Figure) -> None:
        plt.close(fig)

    @staticmethod
    def show() -> None:
        """Display all plots."""
        plt.show()
