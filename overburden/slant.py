"""Slant-depth profiles and maps, and the flat-depth equivalent of a site."""

from __future__ import annotations

import argparse
import bisect
import csv
import math
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

import numpy as np

from overburden.muon_rate import depth_to_mwe_rock, underground_flux
from overburden.terrain import MapFormatError, TerrainMap, direction_from_angles

DEFAULT_START = (0.0, 0.0, -274.505)
DEFAULT_MAP = "../mytools/scan_10km_step10m.csv"

N_PHI = 180
N_COS_THETA = 100
COS_THETA_RANGE = (0.2, 1.0)
MAX_ZENITH_DEG = 70.0

PROFILE_THETAS = range(-60, 80, 2)
FLAT_DEPTHS = range(40, 2000, 20)


def slant_profile(
    terrain, start_point: Sequence[float] = DEFAULT_START, phi: float = 0.0
) -> list[tuple[float, float]]:
    """Slant depth for zenith angles -60°..78° in 2° steps at azimuth ``phi`` (radians).

    Negative angles tilt the ray to the opposite side. Returns
    ``(theta_deg, depth)`` pairs.
    """
    start = tuple(float(v) for v in start_point)
    return [
        (float(theta), float(terrain.slant_depth(start, direction_from_angles(math.radians(theta), phi))))
        for theta in PROFILE_THETAS
    ]


def slant_map(
    terrain, start_point: Sequence[float] = DEFAULT_START
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Slant depth over a grid of azimuth and cos(zenith) bin centres.

    Returns ``(phi_deg, cos_theta, depths)``, where ``depths[i, j]`` belongs to
    ``cos_theta[i]`` and ``phi_deg[j]``. Directions more than 70° from the
    vertical are not traced and hold NaN.
    """
    start = tuple(float(v) for v in start_point)
    phi_width = 360.0 / N_PHI
    phi_deg = (np.arange(N_PHI) + 0.5) * phi_width
    low, high = COS_THETA_RANGE
    cos_theta = low + (np.arange(N_COS_THETA) + 0.5) * (high - low) / N_COS_THETA

    depths = np.full((N_COS_THETA, N_PHI), np.nan)
    for i, cos_value in enumerate(cos_theta):
        theta = math.acos(float(cos_value))
        if math.degrees(theta) > MAX_ZENITH_DEG:
            continue
        for j, phi in enumerate(phi_deg):
            direction = direction_from_angles(theta, math.radians(float(phi)))
            depths[i, j] = terrain.slant_depth(start, direction)
    return phi_deg, cos_theta, depths


def flat_depth_curve(depths: Iterable[float] | None = None) -> list[tuple[float, float]]:
    """Muon rate below flat rock of each depth (metres), as ``(depth_mwe, rate)``."""
    values = FLAT_DEPTHS if depths is None else depths
    return [(depth_to_mwe_rock(float(x)), underground_flux(float(x))) for x in values]


def equivalent_flat_depth(curve: Iterable[tuple[float, float]], rate: float) -> float:
    """Flat depth (m.w.e.) giving ``rate``, linearly interpolated along ``curve``.

    Rates outside the curve are extrapolated from its two nearest points.
    """
    points = sorted((float(r), float(d)) for d, r in curve)
    if not points:
        raise ValueError("the depth curve is empty")
    if len(points) == 1:
        return points[0][1]
    rates = [r for r, _ in points]
    k = min(max(bisect.bisect_left(rates, rate), 1), len(points) - 1)
    (x0, y0), (x1, y1) = points[k - 1], points[k]
    if x1 == x0:
        return y0
    return y0 + (rate - x0) * (y1 - y0) / (x1 - x0)


def _write_rows(path: Path, header: Sequence[str], rows: Iterable[Sequence[float]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(rows)


def main(argv: Sequence[str] | None = None) -> int:
    """Trace slant profiles and maps for a site and compare it with flat depths."""
    parser = argparse.ArgumentParser(
        prog="slant", description="Slant depth and muon flux for an underground site."
    )
    parser.add_argument("map_file", nargs="?", default=DEFAULT_MAP)
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    args = parser.parse_args(argv)

    print("Loading map")
    try:
        terrain = TerrainMap(args.map_file)
    except (OSError, MapFormatError) as exc:
        print(f"Error loading map from file: {args.map_file}: {exc}", file=sys.stderr)
        return 1
    out = args.output_dir
    out.mkdir(parents=True, exist_ok=True)

    print("1D slant plot")
    north = slant_profile(terrain, DEFAULT_START, 0.0)
    east = slant_profile(terrain, DEFAULT_START, math.pi / 2.0)
    _write_rows(
        out / "slunt.csv",
        ["theta_deg", "north_depth_m", "east_depth_m"],
        [(theta, dn, de) for (theta, dn), (_, de) in zip(north, east)],
    )

    print("2D slant plot")
    phi_deg, cos_theta, depths = slant_map(terrain, DEFAULT_START)
    _write_rows(
        out / "slunt_2d.csv",
        ["phi_deg", "cos_theta", "depth_m"],
        [
            (float(phi), float(c), float(depths[i, j]))
            for i, c in enumerate(cos_theta)
            for j, phi in enumerate(phi_deg)
            if not math.isnan(depths[i, j])
        ],
    )

    print("flux plot")
    site_rate = underground_flux(-4, terrain, DEFAULT_START)
    print(f"Site rate = {site_rate:e}")
    curve = flat_depth_curve()
    for x, (mwe, rate) in zip(FLAT_DEPTHS, curve):
        print(f"x= {x:f} m \t xmwe= {mwe:f} m\t  f={rate:e}")
    equivalent = equivalent_flat_depth(curve, site_rate)
    print(f"Site depth like {equivalent:f}")
    _write_rows(out / "get_flux.csv", ["depth_mwe", "rate"], curve)
    _write_rows(out / "get_flux_site.csv", ["depth_mwe", "rate"], [(equivalent, site_rate)])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())