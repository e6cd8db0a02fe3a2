"""
Gauss-Hermite evaluation of MI and GMI for a constellation over AWGN.

Both estimators express every likelihood relative to the transmitted symbol,
so the argument of each logarithm is at least one and no Gaussian density is
evaluated explicitly. The expectation over the complex noise sample
z = sigma * (x_l1 + j*x_l2) is taken with the 100-point product rule from
``QuadratureTable``.
"""

import logging
from abc import ABC, abstractmethod
import numpy as np
from numpy.typing import NDArray
from qam_gmi.information.validation import as_points, ensure_noise_level, label_width
from qam_gmi.labeling.base import bit_subset_indices
from qam_gmi.quadrature.base import QuadratureTable

logger = logging.getLogger(__name__)


def exponential_terms(
    differences: NDArray[np.complex128], sigma: float, samples: NDArray[np.complex128]
) -> NDArray[np.float64]:
    """
    exp(-(|d|^2 - 2*sigma*Re[x*d]) / sigma^2) for every difference d and sample x.

    Evaluated as exp(|x|^2 - |d/sigma - conj(x)|^2), which never forms
    sigma^2. The d = 0 term is exactly one, and terms whose normalized
    distance overflows go to zero instead of NaN.

    Returns an array of shape (len(differences), len(samples)).
    """
    # Scale real and imaginary parts separately: complex division by a
    # subnormal sigma gives 0 * inf = NaN
    with np.errstate(over="ignore"):
        real = (differences.real / sigma)[:, np.newaxis] - samples.real[np.newaxis, :]
        imag = (differences.imag / sigma)[:, np.newaxis] + samples.imag[np.newaxis, :]
        shifted = real**2 + imag**2
    energies = samples.real**2 + samples.imag**2
    return np.exp(energies[np.newaxis, :] - shifted)


class IInformationEstimator(ABC):
    """Interface for information-rate estimators."""

    @abstractmethod
    def evaluate(self, points: NDArray[np.complex128], sigma: float) -> float:
        pass


class MutualInformationEstimator(IInformationEstimator):
    """Average mutual information between transmitted symbol and channel output, in bits."""

    def evaluate(self, points: NDArray[np.complex128], sigma: float) -> float:
        points = as_points(points)
        sigma = ensure_noise_level(sigma)
        samples, weights = QuadratureTable.complex_grid()
        order = points.size

        accumulated = 0.0
        for i in range(order):
            # Row j holds the likelihood of symbol j relative to the sent symbol i
            terms = exponential_terms(points - points[i], sigma, samples)
            accumulated -= float(np.dot(weights, np.log2(terms.sum(axis=0))))

        mutual_information = accumulated / (order * np.pi) + np.log2(order)
        logger.debug("MI(M=%d, sigma=%.6g) = %.6f bits", order, sigma, mutual_information)
        return float(mutual_information)


class GeneralizedMutualInformationEstimator(IInformationEstimator):
    """
    Generalized (bit-wise) mutual information, in bits.

    Sum over the label bits of the mutual information seen by a bit-metric
    receiver. Labels are the point indices, so the constellation size must
    be a power of two.
    """

    def evaluate(self, points: NDArray[np.complex128], sigma: float) -> float:
        points = as_points(points)
        width = label_width(points.size)
        sigma = ensure_noise_level(sigma)
        samples, weights = QuadratureTable.complex_grid()
        order = points.size

        accumulated = 0.0
        for bit in range(width):
            for value in (0, 1):
                subset = bit_subset_indices(bit, value, width)
                for symbol in subset:
                    terms = exponential_terms(points[symbol] - points, sigma, samples)
                    numerator = terms.sum(axis=0)
                    denominator = terms[subset].sum(axis=0)
                    accumulated -= float(np.dot(weights, np.log2(numerator / denominator)))

        generalized_mutual_information = accumulated / (order * np.pi) + width
        logger.debug(
            "GMI(M=%d, sigma=%.6g) = %.6f bits", order, sigma, generalized_mutual_information
        )
        return float(generalized_mutual_information)
