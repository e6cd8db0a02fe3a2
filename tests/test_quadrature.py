from __future__ import annotations

import math

import numpy as np
import pytest
from numpy.polynomial.hermite import hermgauss
from scipy.special import roots_hermite

from qam_gmi.quadrature.base import (
    GAUSS_HERMITE_ABSCISSAE,
    GAUSS_HERMITE_WEIGHTS,
    NUM_NODES,
    QuadratureNode,
    QuadratureTable,
)


def test_table_matches_numpy_and_scipy() -> None:
    x_np, w_np = hermgauss(NUM_NODES)
    x_sp, w_sp = roots_hermite(NUM_NODES)
    np.testing.assert_allclose(GAUSS_HERMITE_ABSCISSAE, x_np, rtol=1e-12)
    np.testing.assert_allclose(GAUSS_HERMITE_WEIGHTS, w_np, rtol=1e-10)
    np.testing.assert_allclose(GAUSS_HERMITE_ABSCISSAE, x_sp, rtol=1e-12)
    np.testing.assert_allclose(GAUSS_HERMITE_WEIGHTS, w_sp, rtol=1e-10)


def test_rule_is_exact_up_to_degree_19() -> None:
    x, w = QuadratureTable.abscissae, QuadratureTable.weights
    assert float(np.sum(w)) == pytest.approx(math.sqrt(math.pi), rel=1e-13)
    # Integral of t**18 * exp(-t**2) over the real line is Gamma(9.5)
    assert float(np.sum(w * x**18)) == pytest.approx(math.gamma(9.5), rel=1e-10)
    assert float(np.sum(w * x**19)) == pytest.approx(0.0, abs=1e-9)


def test_table_is_read_only() -> None:
    with pytest.raises(ValueError):
        GAUSS_HERMITE_ABSCISSAE[0] = 0.0
    with pytest.raises(ValueError):
        GAUSS_HERMITE_WEIGHTS[0] = 0.0


def test_nodes_pairs() -> None:
    nodes = QuadratureTable.nodes()
    assert len(nodes) == NUM_NODES
    assert all(isinstance(node, QuadratureNode) for node in nodes)
    assert nodes[0].abscissa == pytest.approx(-3.436159118837737)
    assert nodes[4].weight == pytest.approx(0.6108626337353258)


def test_complex_grid_is_outer_product() -> None:
    samples, weights = QuadratureTable.complex_grid()
    assert samples.shape == (NUM_NODES**2,)
    assert weights.shape == (NUM_NODES**2,)
    assert float(np.sum(weights)) == pytest.approx(math.pi, rel=1e-13)
    # l1 is the slow index
    assert samples[1] == pytest.approx(GAUSS_HERMITE_ABSCISSAE[0] + 1j * GAUSS_HERMITE_ABSCISSAE[1])
    assert weights[NUM_NODES + 2] == pytest.approx(
        GAUSS_HERMITE_WEIGHTS[1] * GAUSS_HERMITE_WEIGHTS[2]
    )
    assert not samples.flags.writeable
    assert not weights.flags.writeable
