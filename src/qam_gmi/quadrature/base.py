"""
Gauss-Hermite quadrature for the weight function exp(-t**2).

The 10-node rule is exact for polynomials up to degree 19. The outer product
of the table with itself approximates the expectation over a circularly
symmetric complex Gaussian noise sample.
"""

from typing import NamedTuple, Tuple
import numpy as np
from numpy.typing import NDArray

NUM_NODES = 10


def _read_only(values) -> NDArray[np.float64]:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


GAUSS_HERMITE_ABSCISSAE: NDArray[np.float64] = _read_only(
    [
        -3.436159118837737603327,
        -2.532731674232789796409,
        -1.756683649299881773451,
        -1.036610829789513654178,
        -0.3429013272237046087892,
        0.3429013272237046087892,
        1.036610829789513654178,
        1.756683649299881773451,
        2.532731674232789796409,
        3.436159118837737603327,
    ]
)

GAUSS_HERMITE_WEIGHTS: NDArray[np.float64] = _read_only(
    [
        7.64043285523262062916e-6,
        0.001343645746781232692202,
        0.0338743944554810631362,
        0.2401386110823146864165,
        0.6108626337353257987836,
        0.6108626337353257987836,
        0.2401386110823146864165,
        0.03387439445548106313617,
        0.001343645746781232692202,
        7.64043285523262062916e-6,
    ]
)


class QuadratureNode(NamedTuple):
    abscissa: float
    weight: float


class QuadratureTable:
    """Read-only view over the fixed Gauss-Hermite table."""

    abscissae = GAUSS_HERMITE_ABSCISSAE
    weights = GAUSS_HERMITE_WEIGHTS

    @classmethod
    def nodes(cls) -> Tuple[QuadratureNode, ...]:
        return tuple(
            QuadratureNode(float(x), float(w)) for x, w in zip(cls.abscissae, cls.weights)
        )

    @classmethod
    def complex_grid(cls) -> Tuple[NDArray[np.complex128], NDArray[np.float64]]:
        """
        Outer product of the table with itself.

        Returns the 100 complex samples x_l1 + j*x_l2 and the matching product
        weights w_l1*w_l2, flattened with l1 as the slow index. The weights sum
        to pi.
        """
        samples = cls.abscissae[:, np.newaxis] + 1j * cls.abscissae[np.newaxis, :]
        weights = cls.weights[:, np.newaxis] * cls.weights[np.newaxis, :]
        samples = samples.ravel()
        weights = weights.ravel()
        samples.setflags(write=False)
        weights.setflags(write=False)
        return samples, weights
