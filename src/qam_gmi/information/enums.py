from enum import Enum


class MetricType(str, Enum):
    MI = "MI"
    GMI = "GMI"

    def __str__(self):
        return self.value
