"""Local map projection helpers and the ``latlon`` command."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence

EARTH_RADIUS_METERS = 6378137.0
"""WGS-84 equatorial radius."""


def lat_lon_to_northing_easting(
    ref_lat: float, ref_lon: float, lat: float, lon: float
) -> tuple[float, float]:
    """Project ``(lat, lon)`` to metres north and east of a reference point.

    Uses a simple equirectangular projection around the reference point.
    Angles are in degrees; the result is ``(northing, easting)``.
    """
    ref_lat_rad = math.radians(ref_lat)
    d_lat = math.radians(lat) - ref_lat_rad
    d_lon = math.radians(lon) - math.radians(ref_lon)
    northing = d_lat * EARTH_RADIUS_METERS
    easting = d_lon * EARTH_RADIUS_METERS * math.cos(ref_lat_rad)
    return northing, easting


def angle_from_north(northing: float, easting: float) -> float:
    """Angle east of north (clockwise from north), in radians."""
    return math.atan2(easting, northing)


def angle_from_east(northing: float, easting: float) -> float:
    """Angle north of east (counter-clockwise from east), in radians."""
    return math.atan2(northing, easting)


def main(argv: Sequence[str] | None = None) -> int:
    """Print the northing, easting and bearing of a point from a reference."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 4:
        print("Usage: latlon <refLat> <refLon> <lat> <lon>", file=sys.stderr)
        return 1
    try:
        ref_lat, ref_lon, lat, lon = (float(value) for value in args)
    except ValueError as exc:
        print(f"Invalid coordinate: {exc}", file=sys.stderr)
        return 1

    northing, easting = lat_lon_to_northing_easting(ref_lat, ref_lon, lat, lon)
    print(f"Northing: {northing:g} meters")
    print(f"Easting: {easting:g} meters")
    print(f"Angle east of north: {math.degrees(angle_from_north(northing, easting)):g}°")
    print(f"Angle north of east: {math.degrees(angle_from_east(northing, easting)):g}°")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())