from qam_gmi.information.base import (
    GeneralizedMutualInformationEstimator,
    IInformationEstimator,
    MutualInformationEstimator,
)
from qam_gmi.information.enums import MetricType


class EstimatorFactory:
    ESTIMATORS = {
        MetricType.MI: MutualInformationEstimator,
        MetricType.GMI: GeneralizedMutualInformationEstimator,
    }

    @classmethod
    def create_estimator(cls, metric: MetricType) -> IInformationEstimator:
        estimator_class = cls.ESTIMATORS.get(metric)
        if not estimator_class:
            raise ValueError(f"Unsupported metric: {metric}")
        return estimator_class()
