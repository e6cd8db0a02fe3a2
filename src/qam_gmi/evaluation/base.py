"""
Per-SNR evaluation pipeline.

A point runs as a chain of steps: the noise level is derived from the SNR, then
each selected metric step reads it and stores its value under its output key.
Steps share the read-only constellation and symbol energy; the data dictionary
belongs to a single point.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional
import numpy as np
from numpy.typing import NDArray
from qam_gmi.information.base import IInformationEstimator
from qam_gmi.information.enums import MetricType
from qam_gmi.information.factory import EstimatorFactory
from qam_gmi.information.validation import ensure_noise_level

logger = logging.getLogger(__name__)

ChainDataType = Dict[str, Any]

SNR_KEY = "snr_db"


def noise_level(symbol_energy: float, snr_db: float) -> float:
    """Noise standard deviation giving ``snr_db`` for a constellation of energy ``symbol_energy``."""
    return float(np.sqrt(symbol_energy) * 10 ** (-snr_db / 20))


class IEvaluationStep(ABC):
    @abstractmethod
    def set_next(self, step: "IEvaluationStep") -> "IEvaluationStep":
        pass

    @abstractmethod
    def execute(self, data: ChainDataType) -> ChainDataType:
        pass


class BaseEvaluationStep(IEvaluationStep):
    _next_step: Optional[IEvaluationStep] = None
    __output_key__: str = ""

    def set_next(self, step: IEvaluationStep) -> IEvaluationStep:
        self._next_step = step
        return step

    def execute(self, data: ChainDataType) -> ChainDataType:
        if self._next_step:
            return self._next_step.execute(data)
        return data


class NoiseLevelStep(BaseEvaluationStep):
    __output_key__ = "sigma"

    def __init__(self, symbol_energy: float):
        self.symbol_energy = symbol_energy

    def execute(self, data: ChainDataType) -> ChainDataType:
        """
        Convert the SNR of this point into the noise standard deviation.
        """
        snr_db = data.get(SNR_KEY)
        if snr_db is None:
            raise ValueError("SNR not found in the data.")

        sigma = ensure_noise_level(noise_level(self.symbol_energy, snr_db))
        logger.debug("SNR %.2f dB -> sigma %.6g (Es=%.6g)", snr_db, sigma, self.symbol_energy)
        data[self.__output_key__] = sigma
        return super().execute(data)


class MetricStep(BaseEvaluationStep):
    """Evaluates one information metric at the noise level of the point."""

    __metric__: MetricType

    def __init__(self, points: NDArray[np.complex128]):
        self.points = points
        self.estimator: IInformationEstimator = EstimatorFactory.create_estimator(self.__metric__)

    def execute(self, data: ChainDataType) -> ChainDataType:
        sigma = data.get(NoiseLevelStep.__output_key__)
        if sigma is None:
            raise ValueError("Noise level not found in the data.")

        data[self.__output_key__] = self.estimator.evaluate(self.points, sigma)
        return super().execute(data)


class MutualInformationStep(MetricStep):
    __output_key__ = "mutual_information"
    __metric__ = MetricType.MI


class GeneralizedMutualInformationStep(MetricStep):
    __output_key__ = "generalized_mutual_information"
    __metric__ = MetricType.GMI


METRIC_STEPS = {
    MetricType.MI: MutualInformationStep,
    MetricType.GMI: GeneralizedMutualInformationStep,
}


class EvaluationChain:
    def __init__(self, first_step: IEvaluationStep):
        self.first_step = first_step

    def run(self, initial_data: Optional[ChainDataType] = None) -> ChainDataType:
        if initial_data is None:
            initial_data = {}
        return self.first_step.execute(initial_data)


class SnrPointEvaluation:
    """Evaluation of the selected metrics at one SNR point."""

    def __init__(
        self,
        points: NDArray[np.complex128],
        symbol_energy: float,
        metrics: Iterable[MetricType] = (MetricType.MI, MetricType.GMI),
    ):
        self.points = points
        self.symbol_energy = symbol_energy
        self.metrics = tuple(metrics)
        self.chain = self.setup_chain()

    def setup_chain(self) -> EvaluationChain:
        first_step = NoiseLevelStep(symbol_energy=self.symbol_energy)
        last_step: IEvaluationStep = first_step
        for metric in self.metrics:
            step_class = METRIC_STEPS.get(metric)
            if step_class is None:
                raise ValueError(f"Unsupported metric: {metric}")
            last_step = last_step.set_next(step_class(points=self.points))
        return EvaluationChain(first_step=first_step)

    def run(self, snr_db: float) -> ChainDataType:
        return self.chain.run(initial_data={SNR_KEY: float(snr_db)})
