"""Plant models for simulation and testing."""

from pid_tuning.plants.base_plant import BasePlant
from pid_tuning.plants.second_order import TwoLagPlant, PlantParameters

__all__ = [
    "BasePlant",
    "TwoLagPlant",
    "PlantParameters",
]
