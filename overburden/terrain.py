"""Elevation maps and straight-line rock overburden along a ray."""

from __future__ import annotations

import csv
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from os import PathLike

import numpy as np
from scipy.spatial import cKDTree

from overburden.geo import lat_lon_to_northing_easting

REF_LAT = 32.597179
REF_LON = 35.529270
STEP_SIZE = 0.1
MAX_NEIGHBOUR_DISTANCE = 10000.0

_COLUMNS_BY_COMMAS = {4: 5, 5: 6}


class MapFormatError(ValueError):
    """The elevation map file does not have a supported layout."""


@dataclass(frozen=True)
class NearestPoint:
    """The map point nearest to a query, in local metres."""

    index: int
    x: float
    y: float
    z: float
    distance: float


def count_columns(path: str | PathLike[str]) -> int:
    """Count the commas on the second line of a map file (the first data row)."""
    with open(path, encoding="utf-8") as handle:
        handle.readline()
        return handle.readline().count(",")


def direction_from_angles(
    zenith: float, azimuth: float, magnitude: float = 1.0
) -> np.ndarray:
    """Vector of given magnitude at polar angle ``zenith`` and azimuth ``azimuth`` (radians)."""
    sin_theta = math.sin(zenith)
    return magnitude * np.array(
        [sin_theta * math.cos(azimuth), sin_theta * math.sin(azimuth), math.cos(zenith)]
    )


def _read_rows(path: str | PathLike[str], n_columns: int) -> Iterator[tuple[float, float, float]]:
    with open(path, newline="", encoding="utf-8") as handle:
        for row in csv.reader(handle):
            if not row or row[0].lstrip().startswith("#") or len(row) < n_columns:
                continue
            try:
                values = [float(field) for field in row[:n_columns]]
            except ValueError:
                continue
            yield values[0], values[1], values[2]


class TerrainMap:
    """Surface elevations indexed by (northing, easting) around a reference point.

    Horizontal coordinates are metres north (x) and east (y) of
    ``(ref_lat, ref_lon)``; z is the elevation in metres.
    """

    def __init__(
        self,
        path: str | PathLike[str] | None = None,
        ref_lat: float = REF_LAT,
        ref_lon: float = REF_LON,
    ) -> None:
        self.ref_lat = ref_lat
        self.ref_lon = ref_lon
        self.path = path
        self.points = np.empty((0, 2))
        self.elevations = np.empty(0)
        self._tree: cKDTree | None = None
        if path is not None:
            self.load(path)

    def __len__(self) -> int:
        return len(self.elevations)

    def load(self, path: str | PathLike[str]) -> int:
        """Read a ``lat,lon,elevation,dx,dy[,land]`` CSV map; return the point count."""
        commas = count_columns(path)
        n_columns = _COLUMNS_BY_COMMAS.get(commas)
        if n_columns is None:
            raise MapFormatError(f"illegal file structure: {path}")

        xy: list[tuple[float, float]] = []
        z: list[float] = []
        for lat, lon, elevation in _read_rows(path, n_columns):
            xy.append(lat_lon_to_northing_easting(self.ref_lat, self.ref_lon, lat, lon))
            z.append(elevation)

        self.path = path
        self.points = np.array(xy, dtype=float).reshape(-1, 2)
        self.elevations = np.array(z, dtype=float)
        self._tree = cKDTree(self.points) if len(z) else None
        return len(z)

    def _query(self, x: float, y: float) -> tuple[float, int]:
        if self._tree is None:
            raise LookupError("no data points available")
        distance, index = self._tree.query((x, y), k=1)
        return float(distance), int(index)

    def nearest(self, x: float, y: float) -> NearestPoint:
        """Return the map point horizontally nearest to ``(x, y)``."""
        distance, index = self._query(x, y)
        px, py = self.points[index]
        return NearestPoint(index, float(px), float(py), float(self.elevations[index]), distance)

    def propagate(self, start: Sequence[float], direction: Sequence[float]) -> np.ndarray:
        """Step along the ray until it rises above the nearest surface point.

        Stepping also stops once the nearest map point is more than
        10 km away horizontally. Returns the final point.
        """
        start_vec = np.asarray(start, dtype=float)
        dir_vec = np.asarray(direction, dtype=float)
        norm = float(np.linalg.norm(dir_vec))
        if norm == 0.0:
            raise ValueError("direction must be non-zero")
        dir_vec = dir_vec / norm
        vertical_down = dir_vec[0] == 0.0 and dir_vec[1] == 0.0 and dir_vec[2] <= 0.0

        u = 0.0
        current = start_vec.copy()
        while True:
            distance, index = self._query(current[0], current[1])
            if current[2] > self.elevations[index]:
                break
            if distance > MAX_NEIGHBOUR_DISTANCE:
                break
            if vertical_down:
                raise ValueError("ray points straight down and never leaves the ground")
            u += STEP_SIZE
            current = start_vec + u * dir_vec
        return current

    def slant_depth(self, start: Sequence[float], direction: Sequence[float]) -> float:
        """Length of the path through rock from ``start`` along ``direction``."""
        final = self.propagate(start, direction)
        return float(np.linalg.norm(np.asarray(start, dtype=float) - final))

    def slant_depth_at(self, start: Sequence[float], zenith: float, azimuth: float) -> float:
        """Slant depth for a ray given by zenith and azimuth angles in radians."""
        return self.slant_depth(start, direction_from_angles(zenith, azimuth))