import argparse
import os
import threading
import time
from PIL import Image
from qam_gmi.configuration.base import CapacitySettings
from qam_gmi.configuration.log_config import configure_logging
from qam_gmi.constellation.factory import ConstellationFactory
from qam_gmi.driver.base import CapacityDriver
from qam_gmi.plotting.base import plot_capacity_curves, plot_constellation


def save_plot_async(plot: Image.Image, full_path: str):
    os.makedirs(os.path.dirname(full_path), exist_ok=True)
    plot.save(full_path)
    print(f"Plot saved to {full_path}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate MI and GMI of a constellation over AWGN.")
    parser.add_argument("--config", default="config/settings.json", help="Path to the settings file")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    # Load settings
    settings = CapacitySettings.from_json(args.config)
    configure_logging(level=settings.log_level)

    print("-" * 40, "\n")
    print(settings, "\n")
    print("-" * 40)

    # Create Constellation
    if settings.constellation_path:
        constellation = ConstellationFactory.create_constellation_from_file(
            settings.constellation_path, key=settings.constellation_key
        )
    else:
        constellation = ConstellationFactory.create_constellation(
            constellation_type=settings.constellation_type,
            order=settings.constellation_order,
            labeling=settings.labeling,
        )
    print(f"Constellation: {constellation.name} ({constellation.order} points)")
    print(f"Symbol energy: {constellation.symbol_energy():.4f}")
    print("-" * 40)

    # Run Driver
    driver = CapacityDriver(
        constellation,
        metrics=settings.metrics,
        worker_backend=settings.worker_backend,
        num_workers=settings.num_workers,
    )
    start_time = time.time()
    result = driver.run(settings.signal_noise_ratios)
    print(f"Execution time: {time.time() - start_time:.4f} seconds")
    print("-" * 40)

    print(f"{'SNR (dB)':>10} {'MI (bits)':>12} {'GMI (bits)':>12}")
    for i, snr_db in enumerate(result.snr_db):
        mi = result.mutual_information[i] if result.mutual_information is not None else None
        gmi = (
            result.generalized_mutual_information[i]
            if result.generalized_mutual_information is not None
            else None
        )
        mi_text = f"{mi:.6f}" if mi is not None else "-"
        gmi_text = f"{gmi:.6f}" if gmi is not None else "-"
        print(f"{snr_db:>10.2f} {mi_text:>12} {gmi_text:>12}")
    print("-" * 40)

    # Save plots in the background
    base_name = constellation.name.replace(" ", "_").replace("(", "").replace(")", "")
    plots = {
        f"{settings.output_dir}/{base_name}_capacity.png": plot_capacity_curves(result),
        f"{settings.output_dir}/{base_name}_constellation.png": plot_constellation(constellation),
    }
    threads = []
    for plot_path, plot in plots.items():
        thread = threading.Thread(target=save_plot_async, args=(plot, plot_path), daemon=True)
        thread.start()
        threads.append(thread)
    print("Saving plots in the background...")

    # Wait for all threads to finish
    for thread in threads:
        thread.join()
