from __future__ import annotations

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")


@pytest.fixture
def qpsk_gray() -> np.ndarray:
    """4-QAM where bit 0 flips the imaginary sign and bit 1 the real sign."""
    return np.array([1 + 1j, 1 - 1j, -1 + 1j, -1 - 1j])


@pytest.fixture
def qpsk_anti_gray() -> np.ndarray:
    """4-QAM where bit 1 is the product of the two signs."""
    return np.array([1 + 1j, -1 - 1j, 1 - 1j, -1 + 1j])
