"""Cosmic-ray muon flux at the surface and below a rock overburden."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from overburden.terrain import direction_from_angles

A_LOSS = 2.0e-3
"""Ionisation energy loss, GeV per g/cm^2."""
B_LOSS = 4.0e-6
"""Radiative energy loss coefficient, per g/cm^2."""
RHO_ROCK = 2.65
"""Standard rock density, g/cm^3."""
RHO_WATER = 1.00
"""Water density, g/cm^3."""

DEFAULT_START = (0.0, 0.0, -274.505)

N_THETA = 90
N_PHI = 120
N_ENERGY = 100


class SlantDepthSource(Protocol):
    """Anything that can give the rock path length along a ray."""

    def slant_depth(self, start: Sequence[float], direction: Sequence[float]) -> float:
        ...


def depth_to_mwe(r: float, rho: float) -> float:
    """Depth ``r`` through material of density ``rho`` (g/cm^3) in metres water equivalent."""
    return r * rho / RHO_WATER


def depth_to_mwe_rock(r: float) -> float:
    """Depth through standard rock in metres water equivalent."""
    return depth_to_mwe(r, RHO_ROCK)


def depth_to_gram_cm2(r: float, rho: float) -> float:
    """Column density in g/cm^2 of ``r`` metres of material with density ``rho``."""
    return r * 100.0 * rho


def depth_to_gram_cm2_rock(r: float) -> float:
    """Column density in g/cm^2 of ``r`` metres of standard rock."""
    return depth_to_gram_cm2(r, RHO_ROCK)


def depth_to_gram_cm2_water(r: float) -> float:
    """Column density in g/cm^2 of ``r`` metres of water."""
    return depth_to_gram_cm2(r, RHO_WATER)


def surface_muon_flux(energy, theta: float):
    """Gaisser surface muon spectrum dN/dE/dOmega in 1/(m^2 s sr GeV).

    ``energy`` is in GeV (scalar or array); ``theta`` is the zenith angle in radians.
    """
    cos_theta = math.cos(theta)
    e = np.asarray(energy, dtype=float)
    flux = 0.14 * np.power(e, -2.7) * (
        1.0 / (1.0 + 1.1 * e * cos_theta / 115.0)
        + 0.054 / (1.0 + 1.1 * e * cos_theta / 850.0)
    )
    return float(flux) if flux.ndim == 0 else flux


def energy_min(x: float) -> float:
    """Minimum surface energy (GeV) for a muon to cross ``x`` g/cm^2.

    Uses the ionisation-only approximation ``a * X``, valid for depths well
    below ``1/b`` (about 2.5 km water equivalent).
    """
    return A_LOSS * x


def _energy_grid() -> tuple[np.ndarray, np.ndarray]:
    energies = np.power(10.0, 6.0 * np.arange(N_ENERGY) / (N_ENERGY - 1))
    widths = np.diff(energies)
    widths = np.append(widths, widths[-1])
    return energies, widths


def underground_flux(
    depth: float,
    terrain: SlantDepthSource | None = None,
    start_point: Sequence[float] = DEFAULT_START,
) -> float:
    """Integrated muon rate (1/(m^2 s)) over the upper hemisphere below rock.

    A positive ``depth`` (metres of rock) uses a flat overburden, so the path
    length is ``depth / cos(theta)``. Otherwise the slant depth of each
    direction is traced through ``terrain`` from ``start_point``.
    """
    if depth <= 0 and terrain is None:
        raise ValueError("a terrain is needed when no positive flat depth is given")

    energies, widths = _energy_grid()
    d_theta = (math.pi / 2.0) / N_THETA
    d_phi = 2.0 * math.pi / N_PHI
    start = tuple(float(v) for v in start_point)

    total = 0.0
    for i in range(N_THETA):
        theta = (i + 0.5) * d_theta
        weights = surface_muon_flux(energies, theta) * widths * math.sin(theta) * d_theta * d_phi
        if depth > 0:
            rock = depth / math.cos(theta)
            threshold = energy_min(depth_to_gram_cm2_rock(rock))
            total += N_PHI * float(weights[energies > threshold].sum())
            continue
        for j in range(N_PHI):
            direction = direction_from_angles(theta, d_phi * j)
            rock = terrain.slant_depth(start, direction)
            threshold = energy_min(depth_to_gram_cm2_rock(rock))
            total += float(weights[energies > threshold].sum())
    return total