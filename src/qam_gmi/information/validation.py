import math
import numpy as np
from numpy.typing import NDArray
from qam_gmi.errors.base import InvalidConstellationSize, InvalidNoiseLevel, NonFiniteInput


def as_points(points) -> NDArray[np.complex128]:
    """Copy ``points`` into a flat complex128 array and reject empty or non-finite input."""
    array = np.array(points, dtype=np.complex128).ravel()
    if array.size == 0:
        raise InvalidConstellationSize("Constellation must contain at least one point.")
    if not np.all(np.isfinite(array)):
        raise NonFiniteInput("Constellation points must be finite.")
    return array


def as_snr_list(snr_db) -> NDArray[np.float64]:
    array = np.array(snr_db, dtype=np.float64).ravel()
    if not np.all(np.isfinite(array)):
        raise NonFiniteInput("SNR values must be finite.")
    return array


def ensure_noise_level(sigma: float) -> float:
    if not math.isfinite(sigma) or sigma <= 0.0:
        raise InvalidNoiseLevel(f"Noise level must be finite and positive, got {sigma}.")
    return float(sigma)


def label_width(order: int) -> int:
    """log2(order), or InvalidConstellationSize when order is not a power of two."""
    if order < 1 or order & (order - 1):
        raise InvalidConstellationSize(
            f"Constellation size must be a power of two for bit labeling, got {order}."
        )
    return order.bit_length() - 1
