"""Toy cosmic-muon simulation through a terrain overburden."""

from __future__ import annotations

import argparse
import csv
import math
import random
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from overburden.terrain import MapFormatError, TerrainMap

DEFAULT_START = (0.0, 0.0, -274.505)
DEFAULT_MAP = "R60km_0.1.csv"

N_MUONS = 1000
MIN_ENERGY = 1.0
"""Lowest generated muon energy, GeV."""
MAX_ENERGY = 1000.0
"""Highest generated muon energy, GeV."""
SPECTRAL_INDEX = -2.7
CHARACTERISTIC_DEPTH = 500.0
"""Attenuation length of the survival estimate, metres."""

RUNS = ((0.0, 0.05), (90.0, 0.05), (0.0, 0.0))


@dataclass
class Histogram:
    """Fixed-width one-dimensional histogram with under- and overflow."""

    n_bins: int
    low: float
    high: float
    title: str = ""
    contents: np.ndarray = field(init=False, repr=False)
    underflow: float = field(init=False, default=0.0)
    overflow: float = field(init=False, default=0.0)
    entries: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.n_bins <= 0:
            raise ValueError("a histogram needs at least one bin")
        if not self.high > self.low:
            raise ValueError("the upper edge must be above the lower edge")
        self.contents = np.zeros(self.n_bins)

    @property
    def width(self) -> float:
        """Width of one bin."""
        return (self.high - self.low) / self.n_bins

    @property
    def edges(self) -> np.ndarray:
        """The ``n_bins + 1`` bin edges."""
        return np.linspace(self.low, self.high, self.n_bins + 1)

    @property
    def centers(self) -> np.ndarray:
        """Centres of the bins."""
        return self.low + (np.arange(self.n_bins) + 0.5) * self.width

    @property
    def integral(self) -> float:
        """Sum of the in-range bin contents."""
        return float(self.contents.sum())

    def bin_index(self, value: float) -> int | None:
        """Index of the bin holding ``value``, or ``None`` if out of range."""
        if math.isnan(value) or value < self.low or value >= self.high:
            return None
        return min(int((value - self.low) / self.width), self.n_bins - 1)

    def fill(self, value: float, weight: float = 1.0) -> None:
        """Add ``weight`` to the bin containing ``value``."""
        self.entries += 1
        index = self.bin_index(value)
        if index is not None:
            self.contents[index] += weight
        elif value < self.low:
            self.underflow += weight
        else:
            self.overflow += weight


@dataclass
class SimulationResult:
    """Histograms and per-muon values of one simulation run."""

    energy: Histogram
    depth: Histogram
    survival: Histogram
    angles: list[tuple[float, float]] = field(default_factory=list)
    depths: list[float] = field(default_factory=list)


def _new_result() -> SimulationResult:
    return SimulationResult(
        energy=Histogram(100, MIN_ENERGY, MAX_ENERGY, "Energy Distribution (GeV)"),
        depth=Histogram(500, 0.0, 5000.0, "Depth"),
        survival=Histogram(1000, 0.0, 1.0, "Depth Survival Probability"),
    )


def simulate_muons(
    terrain,
    azimuth0: float = 0.0,
    azimuth_open: float = 0.0,
    n_muons: int = N_MUONS,
    start_point: Sequence[float] = DEFAULT_START,
    rng: random.Random | None = None,
) -> SimulationResult:
    """Throw muons with a cos^2 zenith distribution and record their rock depth.

    With ``azimuth_open > 0`` azimuths are drawn within ``azimuth0 ± azimuth_open``
    degrees, otherwise over the full circle; half of them are turned by 180°.
    ``terrain`` must provide ``slant_depth_at(start, zenith, azimuth)``.
    """
    rng = rng or random.Random()
    start = tuple(float(v) for v in start_point)
    result = _new_result()

    for _ in range(n_muons):
        energy = MIN_ENERGY * (MAX_ENERGY / MIN_ENERGY) ** rng.random()
        result.energy.fill(energy, energy**SPECTRAL_INDEX)

        zenith = math.degrees(math.acos(math.sqrt(rng.random())))
        if azimuth_open > 0:
            azimuth = rng.uniform(-azimuth_open, azimuth_open) + azimuth0
        else:
            azimuth = rng.uniform(0.0, 360.0)
        if rng.uniform(-1.0, 1.0) < 0:
            azimuth += 180.0
        result.angles.append((azimuth, zenith))

        depth = float(terrain.slant_depth_at(start, math.radians(zenith), math.radians(azimuth)))
        cos_zenith = math.cos(math.radians(zenith))
        survival = math.exp(-depth / (CHARACTERISTIC_DEPTH * cos_zenith))
        result.depths.append(depth)
        result.depth.fill(depth)
        result.survival.fill(survival)
    return result


def _write_result(path: Path, result: SimulationResult) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["histogram", "low", "high", "content"])
        for name, hist in (
            ("energy", result.energy),
            ("depth", result.depth),
            ("survival", result.survival),
        ):
            edges = hist.edges
            for low, high, content in zip(edges[:-1], edges[1:], hist.contents):
                writer.writerow([name, f"{low:g}", f"{high:g}", f"{content:g}"])


def main(argv: Sequence[str] | None = None) -> int:
    """Run the north, east and all-sky simulations and write their histograms."""
    parser = argparse.ArgumentParser(
        prog="cosmic-muons", description="Simulate muon depths through a terrain map."
    )
    parser.add_argument("map_file", nargs="?", default=DEFAULT_MAP)
    parser.add_argument("--muons", type=int, default=N_MUONS)
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    try:
        terrain = TerrainMap(args.map_file)
    except (OSError, MapFormatError) as exc:
        print(f"Error loading map from file: {args.map_file}: {exc}", file=sys.stderr)
        return 1

    rng = random.Random(args.seed)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    for azimuth0, azimuth_open in RUNS:
        result = simulate_muons(terrain, azimuth0, azimuth_open, args.muons, rng=rng)
        out = args.output_dir / f"cosmic_muon_simulation_{azimuth0:.2f}_{azimuth_open:.2f}.csv"
        _write_result(out, result)
        mean = float(np.mean(result.depths)) if result.depths else float("nan")
        print(f"azimuth {azimuth0:.2f} ± {azimuth_open:.2f}: mean depth {mean:.1f} m -> {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())