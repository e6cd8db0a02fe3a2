from io import BytesIO
import numpy as np
import matplotlib.pyplot as plt
from PIL import Image
from qam_gmi.constellation.base import Constellation
from qam_gmi.driver.base import CapacityResult


def _figure_to_image(dpi: int) -> Image.Image:
    """Render the current figure into a Pillow image and close it."""
    buffer = BytesIO()
    plt.savefig(buffer, format="png", dpi=dpi)
    buffer.seek(0)
    img = Image.open(buffer)
    img.load()
    plt.close()
    return img


def plot_capacity_curves(result: CapacityResult, dpi: int = 150) -> Image.Image:
    """
    Plot MI and GMI versus SNR, with the log2(M) ceiling.
    """
    plt.figure(figsize=(8, 6))
    if result.mutual_information is not None:
        plt.plot(result.snr_db, result.mutual_information, "o-", color="blue", label="MI")
    if result.generalized_mutual_information is not None:
        plt.plot(
            result.snr_db,
            result.generalized_mutual_information,
            "s--",
            color="red",
            label="GMI",
        )
    plt.axhline(np.log2(result.order), color="black", linewidth=0.8, alpha=0.5)

    plt.title(f"AWGN information rates: {result.constellation_name}")
    plt.xlabel("SNR (dB)")
    plt.ylabel("Bits per symbol")
    plt.legend(loc="lower right")
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    return _figure_to_image(dpi)


def plot_constellation(constellation: Constellation, dpi: int = 150) -> Image.Image:
    """Scatter the constellation points annotated with their binary labels."""
    points = constellation.points
    plt.figure(figsize=(8, 8))
    plt.scatter(points.real, points.imag, color="blue", s=60, zorder=5)

    # Non power-of-two sizes carry no bit label, show the index instead
    labeled = (constellation.order & (constellation.order - 1)) == 0
    # Label offset scales with the constellation so 256-QAM stays readable
    offset = 0.05 * max(np.max(np.abs(points)), 1e-12)
    for index, symbol in enumerate(points):
        plt.text(
            symbol.real,
            symbol.imag + offset,
            constellation.label(index) if labeled else str(index),
            fontsize=8,
            ha="center",
            va="bottom",
        )

    plt.title(f"{constellation.name} constellation")
    plt.xlabel("In-Phase")
    plt.ylabel("Quadrature")
    plt.axhline(0, color="black", linewidth=0.8, alpha=0.5)
    plt.axvline(0, color="black", linewidth=0.8, alpha=0.5)
    plt.grid(True, alpha=0.3)
    plt.axis("equal")
    plt.tight_layout()
    return _figure_to_image(dpi)
