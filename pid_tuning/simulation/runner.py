"""
Background simulation with last-writer-wins delivery.

Lets an interactive front end keep editing inputs while a simulation runs:
only the most recently submitted gain set is ever delivered.
"""

from typing import Callable, Optional
from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading

from pid_tuning.core.tuning_rules import ControllerGains
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.simulation.simulator import ProcessSimulator, SimulationResult


logger = logging.getLogger(__name__)


class LatestSimulationRunner:
    """
    Runs simulations on a single worker thread.

    A newer submission cancels a queued run that has not started yet, and
    results from any run that is no longer the latest are dropped.

    Example:
        >>> with LatestSimulationRunner() as runner:
        ...     runner.submit(ControllerGains(kp=1.32, ti=10.0, td=2.5))
        ...     result = runner.wait(timeout=5.0)
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        on_result: Optional[Callable[[SimulationResult], None]] = None,
        simulator: Optional[ProcessSimulator] = None
    ):
        """
        Initialize runner.

        Args:
            config: Simulation settings (defaults if None)
            on_result: Called on the worker thread with each fresh result; a
                submission racing the call itself can still follow it
            simulator: Simulator to use instead of one built from config
        """
        self._simulator = simulator or ProcessSimulator(config)
        self._on_result = on_result
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pid-sim")

        self._lock = threading.Lock()
        self._done = threading.Condition(self._lock)
        self._generation = 0
        self._pending: Optional[Future] = None
        self._latest_result: Optional[SimulationResult] = None
        self._latest_error: Optional[BaseException] = None
        self._latest_generation = 0
        self._closed = False

    def submit(self, gains: ControllerGains) -> int:
        """
        Schedule a simulation for ``gains``.

        Args:
            gains: Controller gains

        Returns:
            Generation number of this submission
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Runner is shut down")
            self._generation += 1
            generation = self._generation
            if self._pending is not None and self._pending.cancel():
                logger.debug("Cancelled queued simulation superseded by generation %d", generation)
            self._pending = self._executor.submit(self._run, generation, gains)
        return generation

    def _run(self, generation: int, gains: ControllerGains) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Skipping stale simulation generation %d", generation)
                return

        try:
            result = self._simulator.run(gains)
        except Exception as e:
            with self._lock:
                if generation == self._generation:
                    self._latest_error = e
                    self._latest_result = None
                    self._latest_generation = generation
                    self._done.notify_all()
            raise

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale result of generation %d", generation)
                return
            self._latest_error = None
            self._latest_result = result
            self._latest_generation = generation
            self._done.notify_all()

        if self._on_result is None:
            return
        with self._lock:
            if generation != self._generation:
                logger.debug("Not delivering result of superseded generation %d", generation)
                return
        try:
            self._on_result(result)
        except Exception:
            # Nobody reads the worker's future, so report here as well
            logger.exception("Result callback failed for generation %d", generation)
            raise

    @property
    def generation(self) -> int:
        """Generation number of the most recent submission."""
        with self._lock:
            return self._generation

    @property
    def latest_result(self) -> Optional[SimulationResult]:
        """Result of the most recent submission, if it has completed."""
        with self._lock:
            if self._latest_generation != self._generation:
                return None
            return self._latest_result

    def wait(self, timeout: Optional[float] = None) -> Optional[SimulationResult]:
        """
        Block until the most recent submission has completed.

        Args:
            timeout: Seconds to wait (None waits forever)

        Returns:
            The latest result, or None on timeout

        Raises:
            Exception: Whatever the latest simulation raised
        """
        with self._done:
            self._done.wait_for(
                lambda: self._latest_generation == self._generation,
                timeout=timeout
            )
            if self._latest_generation != self._generation:
                return None
            if self._latest_error is not None:
                raise self._latest_error
            return self._latest_result

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release the worker thread."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()
        return False
