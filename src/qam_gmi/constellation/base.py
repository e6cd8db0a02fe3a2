import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, field_validator
from qam_gmi.information.validation import as_points, label_width


def symbol_energy(points: NDArray[np.complex128]) -> float:
    """Mean squared magnitude of the constellation points."""
    return float(np.mean(np.abs(points) ** 2))


class Constellation(BaseModel):
    """
    Ordered, immutable set of complex constellation points.

    The position of a point is its binary label: bit k of the index is bit k
    of the label.
    """

    points: NDArray[np.complex128]
    name: str = "CUSTOM"

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("points", mode="before")
    @classmethod
    def _freeze_points(cls, value):
        points = np.array(value, dtype=np.complex128).ravel()
        points.setflags(write=False)
        return points

    @classmethod
    def from_points(cls, points, name: str = "CUSTOM") -> "Constellation":
        """Build a constellation, rejecting empty or non-finite input."""
        return cls(points=as_points(points), name=name)

    @property
    def order(self) -> int:
        return int(self.points.size)

    @property
    def bits_per_symbol(self) -> int:
        return label_width(self.order)

    def symbol_energy(self) -> float:
        return symbol_energy(self.points)

    def normalized(self) -> "Constellation":
        """Copy of the constellation scaled to unit average symbol energy."""
        energy = self.symbol_energy()
        if energy == 0:
            raise ValueError("Cannot normalize a constellation with zero energy.")
        return Constellation(points=self.points / np.sqrt(energy), name=self.name)

    def label(self, index: int) -> str:
        """Binary word of a point, most significant bit first."""
        return format(index, f"0{self.bits_per_symbol}b") if self.order > 1 else ""
