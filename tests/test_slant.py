import math

import numpy as np
import pytest

from overburden.muon_rate import depth_to_mwe_rock, underground_flux
from overburden.slant import (
    equivalent_flat_depth,
    flat_depth_curve,
    slant_map,
    slant_profile,
)
from overburden.terrain import TerrainMap


def _flat_terrain(tmp_path, elevation=0.0):
    lines = ["lat,lon,elevation,dx,dy"]
    for i in range(11):
        for j in range(11):
            lines.append(f"{32.592 + 0.001 * i:.6f},{35.524 + 0.001 * j:.6f},{elevation},0,0")
    path = tmp_path / "flat.csv"
    path.write_text("\n".join(lines) + "\n")
    return TerrainMap(path)


class _VerticalDepth:
    def __init__(self, thickness):
        self.thickness = thickness
        self.calls = 0

    def slant_depth(self, start, direction):
        self.calls += 1
        return self.thickness / direction[2]


def test_profile_angles(tmp_path):
    terrain = _flat_terrain(tmp_path)
    profile = slant_profile(terrain, (0.0, 0.0, -10.0), 0.0)
    thetas = [theta for theta, _ in profile]
    assert thetas[0] == -60.0
    assert thetas[-1] == 78.0
    assert all(b - a == 2.0 for a, b in zip(thetas, thetas[1:]))


def test_profile_follows_flat_overburden(tmp_path):
    terrain = _flat_terrain(tmp_path)
    for theta, depth in slant_profile(terrain, (0.0, 0.0, -10.0), math.pi / 2):
        expected = 10.0 / math.cos(math.radians(theta))
        assert expected <= depth <= expected + 0.11


def test_profile_is_symmetric_on_flat_ground(tmp_path):
    terrain = _flat_terrain(tmp_path)
    profile = dict(slant_profile(terrain, (0.0, 0.0, -10.0)))
    assert profile[-30.0] == pytest.approx(profile[30.0], abs=0.11)


def test_map_shape_and_axes():
    phi, cos_theta, depths = slant_map(_VerticalDepth(10.0))
    assert depths.shape == (len(cos_theta), len(phi))
    assert len(phi) == 180 and len(cos_theta) == 100
    assert 0.0 < phi.min() and phi.max() < 360.0
    assert 0.2 < cos_theta.min() and cos_theta.max() < 1.0


def test_map_skips_low_elevation_rows():
    terrain = _VerticalDepth(10.0)
    phi, cos_theta, depths = slant_map(terrain)
    traced = np.degrees(np.arccos(cos_theta)) <= 70.0
    assert np.isnan(depths[~traced]).all()
    assert np.isfinite(depths[traced]).all()
    assert terrain.calls == int(traced.sum()) * len(phi)


def test_map_depths_match_terrain():
    _, cos_theta, depths = slant_map(_VerticalDepth(10.0))
    for row, c in zip(depths, cos_theta):
        if np.isfinite(row).all():
            assert np.allclose(row, 10.0 / c)


def test_flat_depth_curve_values():
    curve = flat_depth_curve([100.0, 200.0])
    assert [mwe for mwe, _ in curve] == [depth_to_mwe_rock(100.0), depth_to_mwe_rock(200.0)]
    assert curve[0][1] == pytest.approx(underground_flux(100.0))
    assert curve[0][1] > curve[1][1] > 0


def test_flat_depth_curve_default_length():
    # 40 m to 1980 m in 20 m steps.
    assert len(flat_depth_curve()) == 98


def test_equivalent_depth_interpolates():
    curve = [(10.0, 3.0), (20.0, 1.0)]
    assert equivalent_flat_depth(curve, 2.0) == pytest.approx(15.0)
    assert equivalent_flat_depth(curve, 1.0) == pytest.approx(20.0)


def test_equivalent_depth_extrapolates():
    curve = [(10.0, 3.0), (20.0, 1.0)]
    assert equivalent_flat_depth(curve, 0.0) == pytest.approx(25.0)


def test_equivalent_depth_round_trip():
    curve = flat_depth_curve([100.0, 200.0, 300.0])
    mwe, rate = curve[1]
    assert equivalent_flat_depth(curve, rate) == pytest.approx(mwe)


def test_equivalent_depth_needs_points():
    with pytest.raises(ValueError):
        equivalent_flat_depth([], 1.0)