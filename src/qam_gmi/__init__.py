from qam_gmi.driver.base import CapacityDriver, CapacityResult, qam_gmi
from qam_gmi.errors.base import (
    CapacityError,
    InvalidConstellationSize,
    InvalidNoiseLevel,
    NonFiniteInput,
)

__all__ = [
    "CapacityDriver",
    "CapacityResult",
    "CapacityError",
    "InvalidConstellationSize",
    "InvalidNoiseLevel",
    "NonFiniteInput",
    "qam_gmi",
]
