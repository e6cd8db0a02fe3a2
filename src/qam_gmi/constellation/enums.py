from enum import Enum


class ConstellationType(str, Enum):
    QAM = "QAM"
    PSK = "PSK"
    CUSTOM = "CUSTOM"

    def __str__(self):
        return self.value


class LabelingType(str, Enum):
    GRAY = "GRAY"
    NATURAL = "NATURAL"

    def __str__(self):
        return self.value
