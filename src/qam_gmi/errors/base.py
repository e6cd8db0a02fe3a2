class CapacityError(ValueError):
    """Base class for invalid inputs to the MI/GMI estimators."""


class InvalidConstellationSize(CapacityError):
    """GMI requested for a constellation whose size is not a power of two."""


class InvalidNoiseLevel(CapacityError):
    """Derived noise standard deviation is not a finite positive number."""


class NonFiniteInput(CapacityError):
    """NaN or Inf found in the constellation points or in the SNR list."""
