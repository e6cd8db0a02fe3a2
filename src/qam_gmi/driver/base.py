import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial
from typing import Dict, Iterable, Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel
from qam_gmi.configuration.enums import WorkerBackend
from qam_gmi.constellation.base import Constellation, symbol_energy
from qam_gmi.evaluation.base import (
    METRIC_STEPS,
    NoiseLevelStep,
    SnrPointEvaluation,
    noise_level,
)
from qam_gmi.information.enums import MetricType
from qam_gmi.information.validation import (
    as_points,
    as_snr_list,
    ensure_noise_level,
    label_width,
)

logger = logging.getLogger(__name__)

ConstellationLike = Union[Constellation, NDArray[np.complex128], Iterable[complex]]


def evaluate_snr_point(
    points: NDArray[np.complex128],
    energy: float,
    snr_db: float,
    metrics: Tuple[MetricType, ...] = (MetricType.MI, MetricType.GMI),
) -> Dict[MetricType, float]:
    """Evaluate the selected metrics at a single SNR. Module level so process pools can pickle it."""
    data = SnrPointEvaluation(points=points, symbol_energy=energy, metrics=metrics).run(snr_db)
    logger.debug("SNR %.2f dB evaluated at sigma %.6g", snr_db, data[NoiseLevelStep.__output_key__])
    return {metric: data[METRIC_STEPS[metric].__output_key__] for metric in metrics}


class CapacityResult(BaseModel):
    """MI and GMI curves, index-aligned with the input SNR list."""

    snr_db: NDArray[np.float64]
    symbol_energy: float
    order: int
    constellation_name: str = "CUSTOM"
    mutual_information: Optional[NDArray[np.float64]] = None
    generalized_mutual_information: Optional[NDArray[np.float64]] = None

    model_config = {"arbitrary_types_allowed": True}


class CapacityDriver:
    """
    Evaluates MI and GMI of one constellation over a list of SNRs.

    Each SNR point is evaluated independently on a worker pool; results are
    written back in input order whatever order the workers finish in.
    """

    EXECUTORS = {
        WorkerBackend.THREAD: ThreadPoolExecutor,
        WorkerBackend.PROCESS: ProcessPoolExecutor,
    }

    def __init__(
        self,
        constellation: ConstellationLike,
        metrics: Iterable[MetricType] = (MetricType.MI, MetricType.GMI),
        worker_backend: WorkerBackend = WorkerBackend.THREAD,
        num_workers: Optional[int] = None,
    ):
        if isinstance(constellation, Constellation):
            self.name = constellation.name
            self.points = as_points(constellation.points)
        else:
            self.name = "CUSTOM"
            self.points = as_points(constellation)
        self.points.setflags(write=False)

        self.metrics = tuple(MetricType(metric) for metric in metrics)
        if not self.metrics:
            raise ValueError("At least one metric must be selected.")
        if MetricType.GMI in self.metrics:
            label_width(self.points.size)

        self.worker_backend = WorkerBackend(worker_backend)
        self.num_workers = num_workers
        self.symbol_energy = symbol_energy(self.points)

    def _validate_snr_list(self, snr_db) -> NDArray[np.float64]:
        """Reject the whole call before any estimator runs."""
        snr_list = as_snr_list(snr_db)
        for snr in snr_list:
            ensure_noise_level(noise_level(self.symbol_energy, snr))
        return snr_list

    def _create_executor(self) -> Optional[Executor]:
        if self.worker_backend == WorkerBackend.SERIAL:
            return None
        executor_class = self.EXECUTORS.get(self.worker_backend)
        if executor_class is None:
            raise ValueError(f"Unsupported worker backend: {self.worker_backend}")
        return executor_class(max_workers=self.num_workers)

    def run(self, snr_db) -> CapacityResult:
        snr_list = self._validate_snr_list(snr_db)
        logger.info(
            "Evaluating %s for %s (M=%d, Es=%.6g) at %d SNR points using %s workers",
            "/".join(str(metric) for metric in self.metrics),
            self.name,
            self.points.size,
            self.symbol_energy,
            snr_list.size,
            self.worker_backend,
        )

        task = partial(
            evaluate_snr_point, self.points, self.symbol_energy, metrics=self.metrics
        )
        executor = self._create_executor()
        if executor is None:
            point_results = [task(snr) for snr in snr_list.tolist()]
        else:
            with executor:
                # map yields results in submission order
                point_results = list(executor.map(task, snr_list.tolist()))

        outputs = {
            metric: np.array([result[metric] for result in point_results], dtype=np.float64)
            for metric in self.metrics
        }
        logger.info("Finished evaluating %d SNR points", snr_list.size)
        return CapacityResult(
            snr_db=snr_list,
            symbol_energy=self.symbol_energy,
            constellation_name=self.name,
            mutual_information=outputs.get(MetricType.MI),
            generalized_mutual_information=outputs.get(MetricType.GMI),
            order=self.points.size,
        )


def qam_gmi(
    constellation: ConstellationLike, snr_db: Iterable[float]
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    MI and GMI, in bits, of ``constellation`` over AWGN at each SNR of ``snr_db``.

    Bit k of a point's index is bit k of its label. Returns two arrays
    aligned with ``snr_db``. Raises ``InvalidConstellationSize`` when the
    constellation size is not a power of two, ``InvalidNoiseLevel`` when an
    SNR or a zero-energy constellation gives a non-positive noise level, and
    ``NonFiniteInput`` for NaN or Inf inputs.
    """
    result = CapacityDriver(constellation).run(snr_db)
    return result.mutual_information, result.generalized_mutual_information
