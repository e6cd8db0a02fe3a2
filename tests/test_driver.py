from __future__ import annotations

import numpy as np
import pytest

from qam_gmi import (
    CapacityDriver,
    CapacityError,
    InvalidConstellationSize,
    InvalidNoiseLevel,
    NonFiniteInput,
    qam_gmi,
)
from qam_gmi.configuration.enums import WorkerBackend
from qam_gmi.constellation.enums import ConstellationType, LabelingType
from qam_gmi.constellation.factory import ConstellationFactory
from qam_gmi.information.base import (
    GeneralizedMutualInformationEstimator,
    MutualInformationEstimator,
)
from qam_gmi.information.enums import MetricType


def test_gray_qpsk_scenario(qpsk_gray: np.ndarray) -> None:
    mi, gmi = qam_gmi(qpsk_gray, [0.0, 10.0, 20.0])
    assert mi.shape == gmi.shape == (3,)
    assert np.all(np.diff(mi) > 0)
    assert np.all(np.diff(gmi) > 0)
    assert mi[-1] > 1.999
    assert gmi[-1] > 1.999
    np.testing.assert_allclose(gmi, mi, atol=1e-9)


def test_natural_labeling_scenario() -> None:
    natural = ConstellationFactory.create_constellation(
        ConstellationType.QAM, 16, LabelingType.NATURAL
    )
    mi, gmi = qam_gmi(natural, [0.0, 10.0])
    assert np.all(mi - gmi > 0.05)


@pytest.mark.parametrize("snr_db", [3300.0, 6200.0])
def test_extreme_snr_saturates(qpsk_gray: np.ndarray, snr_db: float) -> None:
    mi, gmi = qam_gmi(qpsk_gray, [snr_db])
    assert np.all(np.isfinite(mi)) and np.all(np.isfinite(gmi))
    assert mi[0] == pytest.approx(2.0, abs=1e-12)
    assert gmi[0] == pytest.approx(2.0, abs=1e-12)


def test_order_is_preserved(qpsk_gray: np.ndarray) -> None:
    shuffled_mi, shuffled_gmi = qam_gmi(qpsk_gray, [20.0, 0.0, 10.0])
    sorted_mi, sorted_gmi = qam_gmi(qpsk_gray, [0.0, 10.0, 20.0])
    np.testing.assert_array_equal(shuffled_mi, sorted_mi[[2, 0, 1]])
    np.testing.assert_array_equal(shuffled_gmi, sorted_gmi[[2, 0, 1]])


def test_points_are_independent() -> None:
    constellation = ConstellationFactory.create_constellation(ConstellationType.PSK, 8)
    driver = CapacityDriver(constellation)
    first = driver.run([-3.0, 4.0, 12.0, 7.5])
    second = driver.run([-3.0, 4.0, 1.0, 7.5])
    assert first.symbol_energy == second.symbol_energy
    keep = [0, 1, 3]
    np.testing.assert_array_equal(first.mutual_information[keep], second.mutual_information[keep])
    np.testing.assert_array_equal(
        first.generalized_mutual_information[keep], second.generalized_mutual_information[keep]
    )
    assert first.mutual_information[2] != second.mutual_information[2]


@pytest.mark.parametrize(
    "backend", [WorkerBackend.SERIAL, WorkerBackend.THREAD, WorkerBackend.PROCESS]
)
def test_backends_agree(backend: WorkerBackend) -> None:
    constellation = ConstellationFactory.create_constellation(ConstellationType.QAM, 16)
    snr_db = [12.0, -2.0, 5.0, 0.0, 20.0]
    reference = CapacityDriver(constellation, worker_backend=WorkerBackend.SERIAL).run(snr_db)
    result = CapacityDriver(constellation, worker_backend=backend, num_workers=2).run(snr_db)
    np.testing.assert_array_equal(result.snr_db, snr_db)
    np.testing.assert_array_equal(result.mutual_information, reference.mutual_information)
    np.testing.assert_array_equal(
        result.generalized_mutual_information, reference.generalized_mutual_information
    )


def test_result_metadata() -> None:
    constellation = ConstellationFactory.create_constellation(ConstellationType.QAM, 16)
    result = CapacityDriver(constellation).run([10.0])
    assert result.order == 16
    assert result.symbol_energy == pytest.approx(1.0)
    assert result.constellation_name == constellation.name
    assert result.mutual_information.dtype == np.float64


def test_mi_only_accepts_any_size() -> None:
    points = np.exp(2j * np.pi * np.arange(3) / 3)
    result = CapacityDriver(points, metrics=[MetricType.MI]).run([0.0, 10.0])
    assert result.generalized_mutual_information is None
    assert np.all(result.mutual_information > 0)
    with pytest.raises(InvalidConstellationSize):
        qam_gmi(points, [0.0])


def test_gmi_only() -> None:
    result = CapacityDriver([1, -1], metrics=["GMI"]).run([0.0])
    assert result.mutual_information is None
    assert result.generalized_mutual_information.shape == (1,)


def test_requires_a_metric(qpsk_gray: np.ndarray) -> None:
    with pytest.raises(ValueError):
        CapacityDriver(qpsk_gray, metrics=[])


def test_single_point_constellation() -> None:
    mi, gmi = qam_gmi([1 + 1j], [0.0, 30.0])
    np.testing.assert_array_equal(mi, [0.0, 0.0])
    np.testing.assert_array_equal(gmi, [0.0, 0.0])


def test_empty_snr_list(qpsk_gray: np.ndarray) -> None:
    mi, gmi = qam_gmi(qpsk_gray, [])
    assert mi.size == 0
    assert gmi.size == 0


@pytest.mark.parametrize(
    "points, snr_db, error",
    [
        ([1 + 1j, 1 - 1j, -1 + 1j], [0.0], InvalidConstellationSize),
        ([], [0.0], InvalidConstellationSize),
        ([0j, 0j, 0j, 0j], [0.0], InvalidNoiseLevel),
        ([1 + 1j, 1 - 1j, -1 + 1j, -1 - 1j], [0.0, 1e6], InvalidNoiseLevel),
        ([1 + 1j, 1 - 1j, -1 + 1j, -1 - 1j], [0.0, np.inf], NonFiniteInput),
        ([1 + 1j, 1 - 1j, -1 + 1j, -1 - 1j], [np.nan], NonFiniteInput),
        ([1 + 1j, np.nan, -1 + 1j, -1 - 1j], [0.0], NonFiniteInput),
    ],
)
def test_invalid_inputs(points, snr_db, error) -> None:
    with pytest.raises(error):
        qam_gmi(np.array(points, dtype=complex), snr_db)


def test_errors_are_value_errors() -> None:
    for error in (InvalidConstellationSize, InvalidNoiseLevel, NonFiniteInput):
        assert issubclass(error, CapacityError)
        assert issubclass(error, ValueError)


def test_no_estimator_runs_on_invalid_input(monkeypatch, qpsk_gray: np.ndarray) -> None:
    calls = []

    def record(self, points, sigma):
        calls.append(sigma)
        return 0.0

    monkeypatch.setattr(MutualInformationEstimator, "evaluate", record)
    monkeypatch.setattr(GeneralizedMutualInformationEstimator, "evaluate", record)
    driver = CapacityDriver(qpsk_gray, worker_backend=WorkerBackend.SERIAL)
    with pytest.raises(NonFiniteInput):
        driver.run([0.0, 10.0, np.inf])
    with pytest.raises(InvalidNoiseLevel):
        driver.run([0.0, 1e6])
    assert calls == []


def test_inputs_are_not_mutated(qpsk_gray: np.ndarray) -> None:
    points = qpsk_gray.copy()
    snr_db = np.array([5.0, 0.0])
    qam_gmi(points, snr_db)
    np.testing.assert_array_equal(points, qpsk_gray)
    np.testing.assert_array_equal(snr_db, [5.0, 0.0])
    assert points.flags.writeable
