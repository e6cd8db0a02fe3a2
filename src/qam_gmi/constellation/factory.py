import logging
from pathlib import Path
from typing import Dict
import numpy as np
from numpy.typing import NDArray
from scipy.io import loadmat
from qam_gmi.constellation.base import Constellation
from qam_gmi.constellation.enums import ConstellationType, LabelingType

logger = logging.getLogger(__name__)


def gray_code(values):
    return values ^ (values >> 1)


def _is_power_of_two(order: int) -> bool:
    return order >= 1 and (order & (order - 1)) == 0


def _load_txt(path: str) -> NDArray[np.complex128]:
    """One column of real values, or two columns holding real and imaginary parts."""
    data = np.loadtxt(path, dtype=np.float64, ndmin=2)
    if data.shape[1] == 1:
        return data[:, 0].astype(np.complex128)
    if data.shape[1] == 2:
        return data[:, 0] + 1j * data[:, 1]
    raise ValueError(f"Expected one or two columns in {path}, got {data.shape[1]}.")


class ConstellationFactory:
    """Factory class to create constellations."""

    @staticmethod
    def generate_qam(order: int, labeling: LabelingType) -> NDArray[np.complex128]:
        """
        Generate a normalized square QAM constellation.

        Points are laid out top to bottom, left to right. With NATURAL labeling
        the label is the raster position (row in the high bits, column in the
        low bits); with GRAY labeling the row and column numbers are each
        Gray coded, so horizontal and vertical neighbours differ in one bit.
        """
        m_side = int(np.sqrt(order))
        if m_side**2 != order or not _is_power_of_two(order) or order < 4:
            raise ValueError("Order must be an even power of 2 (e.g., 4, 16, 64, 256).")

        levels = np.arange(-m_side + 1, m_side, 2)
        rows, cols = np.divmod(np.arange(order), m_side)
        points = levels[cols] + 1j * levels[::-1][rows]

        if labeling == LabelingType.GRAY:
            half_width = (m_side - 1).bit_length()
            labels = (gray_code(rows) << half_width) | gray_code(cols)
        elif labeling == LabelingType.NATURAL:
            labels = rows * m_side + cols
        else:
            raise ValueError(f"Unsupported labeling: {labeling}")

        const = np.zeros(order, dtype=np.complex128)
        const[labels] = points
        const /= np.sqrt((np.abs(const) ** 2).mean())  # unit average power
        return const

    @staticmethod
    def generate_psk(order: int, labeling: LabelingType) -> NDArray[np.complex128]:
        """Generate a unit-energy PSK constellation, labeled along the circle."""
        if order < 2 or not _is_power_of_two(order):
            raise ValueError("Order must be a power of 2 (e.g., 2, 4, 8, 16).")

        positions = np.arange(order)
        points = np.exp(2j * np.pi * positions / order)

        if labeling == LabelingType.GRAY:
            labels = gray_code(positions)
        elif labeling == LabelingType.NATURAL:
            labels = positions
        else:
            raise ValueError(f"Unsupported labeling: {labeling}")

        const = np.zeros(order, dtype=np.complex128)
        const[labels] = points
        return const  # Already unit power

    GENERATOR_MAP: Dict[ConstellationType, str] = {
        ConstellationType.QAM: "generate_qam",
        ConstellationType.PSK: "generate_psk",
    }

    @classmethod
    def create_constellation(
        cls,
        constellation_type: ConstellationType,
        order: int,
        labeling: LabelingType = LabelingType.GRAY,
    ) -> Constellation:
        generator_name = cls.GENERATOR_MAP.get(constellation_type)
        if generator_name is None:
            raise ValueError(f"Unsupported constellation type: {constellation_type}")
        points = getattr(cls, generator_name)(order, labeling)
        name = f"{order}-{constellation_type} ({labeling})"
        logger.debug("Generated %s constellation", name)
        return Constellation(points=points, name=name)

    EXTENSION_LOADER_MAP = {
        "mat": loadmat,
        "txt": _load_txt,
        "npy": np.load,
    }

    @classmethod
    def create_constellation_from_file(cls, filepath: str, key: str = "C") -> Constellation:
        """Load constellation points from a .npy, .txt or .mat file."""
        extension = filepath.split(".")[-1].lower()

        loader = cls.EXTENSION_LOADER_MAP.get(extension)
        if loader is None:
            raise ValueError(f"Unsupported file extension: {extension}")

        data = loader(filepath)
        if extension == "mat":
            if key not in data:
                raise ValueError(f"Variable '{key}' not found in {filepath}.")
            data = data[key]

        logger.info("Loaded constellation from %s", filepath)
        return Constellation.from_points(np.asarray(data).ravel(), name=Path(filepath).stem)
