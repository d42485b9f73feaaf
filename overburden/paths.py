"""Random straight paths from an underground point up through the terrain."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

DEFAULT_START = (0.0, 0.0, -274.505)


@dataclass(frozen=True)
class PathResult:
    """One traced path: its direction, where it surfaced and its length."""

    direction: np.ndarray
    final_point: np.ndarray
    distance: float

    @property
    def azimuth_deg(self) -> float:
        """Azimuth of the direction in degrees, in [-180, 180]."""
        return math.degrees(math.atan2(self.direction[1], self.direction[0]))

    @property
    def zenith_deg(self) -> float:
        """Polar angle of the direction from vertical, in degrees."""
        x, y, z = (float(v) for v in self.direction)
        return math.degrees(math.atan2(math.hypot(x, y), z))


def random_upper_hemisphere_direction(rng: random.Random | None = None) -> np.ndarray:
    """Unit vector drawn over the sphere and folded into the upper hemisphere."""
    rng = rng or random.Random()
    theta = math.acos(2.0 * rng.random() - 1.0)
    phi = 2.0 * math.pi * rng.random()
    return np.array(
        [
            math.sin(theta) * math.cos(phi),
            math.sin(theta) * math.sin(phi),
            abs(math.cos(theta)),
        ]
    )


def generate_paths(
    terrain,
    n_paths: int,
    start_point: Sequence[float] = DEFAULT_START,
    rng: random.Random | None = None,
) -> list[PathResult]:
    """Trace ``n_paths`` random upward rays from ``start_point`` through ``terrain``."""
    rng = rng or random.Random()
    start = np.asarray(start_point, dtype=float)
    results = []
    for _ in range(n_paths):
        direction = random_upper_hemisphere_direction(rng)
        final = np.asarray(terrain.propagate(start, direction), dtype=float)
        distance = float(np.linalg.norm(start - final))
        results.append(PathResult(direction, final, distance))
    return results