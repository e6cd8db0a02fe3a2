from __future__ import annotations

import numpy as np
from PIL import Image

from qam_gmi.constellation.base import Constellation
from qam_gmi.constellation.enums import ConstellationType
from qam_gmi.constellation.factory import ConstellationFactory
from qam_gmi.driver.base import CapacityDriver
from qam_gmi.information.enums import MetricType
from qam_gmi.plotting.base import plot_capacity_curves, plot_constellation


def test_plot_capacity_curves() -> None:
    constellation = ConstellationFactory.create_constellation(ConstellationType.QAM, 4)
    result = CapacityDriver(constellation).run([0.0, 5.0, 10.0])
    image = plot_capacity_curves(result, dpi=50)
    assert isinstance(image, Image.Image)
    assert image.size[0] > 0 and image.size[1] > 0


def test_plot_capacity_curves_single_metric() -> None:
    result = CapacityDriver([1, -1], metrics=[MetricType.MI]).run([0.0, 3.0])
    assert isinstance(plot_capacity_curves(result, dpi=50), Image.Image)


def test_plot_constellation() -> None:
    constellation = ConstellationFactory.create_constellation(ConstellationType.QAM, 16)
    image = plot_constellation(constellation, dpi=50)
    assert isinstance(image, Image.Image)


def test_plot_constellation_without_bit_labels() -> None:
    constellation = Constellation.from_points(np.exp(2j * np.pi * np.arange(3) / 3))
    assert isinstance(plot_constellation(constellation, dpi=50), Image.Image)
