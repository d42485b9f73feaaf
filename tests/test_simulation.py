import math
import random

import pytest

from overburden.simulation import Histogram, simulate_muons, main


class _ConstantDepth:
    def __init__(self, depth):
        self.depth = depth
        self.calls = []

    def slant_depth_at(self, start, zenith, azimuth):
        self.calls.append((tuple(start), zenith, azimuth))
        return self.depth


def _write_flat_map(path, elevation):
    lines = ["lat,lon,elevation,dx,dy"]
    for i in range(11):
        for j in range(11):
            lines.append(f"{32.592 + 0.001 * i:.6f},{35.524 + 0.001 * j:.6f},{elevation},0,0")
    path.write_text("\n".join(lines) + "\n")


def test_histogram_fill_bins_and_edges():
    hist = Histogram(10, 0.0, 10.0)
    hist.fill(0.0)
    hist.fill(3.5, 2.0)
    hist.fill(9.999)
    assert hist.contents[0] == 1.0
    assert hist.contents[3] == 2.0
    assert hist.contents[9] == 1.0
    assert hist.integral == 4.0
    assert hist.entries == 3


def test_histogram_under_and_overflow():
    hist = Histogram(4, 1.0, 2.0)
    hist.fill(0.5)
    hist.fill(2.0, 3.0)
    assert hist.underflow == 1.0
    assert hist.overflow == 3.0
    assert hist.integral == 0.0
    assert hist.bin_index(2.0) is None


def test_histogram_centers_inside_edges():
    hist = Histogram(5, 0.0, 5000.0)
    assert len(hist.edges) == 6
    assert all(lo < c < hi for lo, c, hi in zip(hist.edges[:-1], hist.centers, hist.edges[1:]))


@pytest.mark.parametrize("n_bins,low,high", [(0, 0.0, 1.0), (10, 1.0, 1.0), (10, 2.0, 1.0)])
def test_histogram_rejects_bad_axes(n_bins, low, high):
    with pytest.raises(ValueError):
        Histogram(n_bins, low, high)


def test_constant_depth_fills_one_bin():
    terrain = _ConstantDepth(250.0)
    result = simulate_muons(terrain, n_muons=50, rng=random.Random(1))
    assert result.depth.entries == 50
    assert result.depth.contents[result.depth.bin_index(250.0)] == 50
    assert result.depths == [250.0] * 50
    assert len(terrain.calls) == 50


def test_survival_stays_in_unit_interval():
    result = simulate_muons(_ConstantDepth(250.0), n_muons=40, rng=random.Random(2))
    assert result.survival.integral == 40
    assert result.survival.underflow == 0
    assert result.survival.overflow == 0


def test_energy_weights_are_in_range():
    result = simulate_muons(_ConstantDepth(10.0), n_muons=30, rng=random.Random(3))
    assert result.energy.entries == 30
    assert result.energy.underflow == 0 and result.energy.overflow == 0
    assert 0 < result.energy.integral <= 30


def test_open_azimuth_window_and_flip():
    result = simulate_muons(_ConstantDepth(1.0), 90.0, 0.05, n_muons=100, rng=random.Random(4))
    for azimuth, zenith in result.angles:
        assert 0.0 <= zenith <= 90.0
        assert abs(azimuth - 90.0) <= 0.05 or abs(azimuth - 270.0) <= 0.05


def test_full_azimuth_range():
    result = simulate_muons(_ConstantDepth(1.0), n_muons=100, rng=random.Random(5))
    assert all(0.0 <= az < 540.0 for az, _ in result.angles)
    assert any(az >= 180.0 for az, _ in result.angles)


def test_terrain_receives_radians():
    terrain = _ConstantDepth(1.0)
    result = simulate_muons(terrain, start_point=(1.0, 2.0, 3.0), n_muons=20, rng=random.Random(6))
    for (start, zenith, azimuth), (az_deg, zen_deg) in zip(terrain.calls, result.angles):
        assert start == (1.0, 2.0, 3.0)
        assert math.isclose(zenith, math.radians(zen_deg))
        assert math.isclose(azimuth, math.radians(az_deg))
        assert 0.0 <= zenith <= math.pi / 2


def test_seed_is_reproducible():
    first = simulate_muons(_ConstantDepth(5.0), n_muons=25, rng=random.Random(7))
    second = simulate_muons(_ConstantDepth(5.0), n_muons=25, rng=random.Random(7))
    assert first.angles == second.angles
    assert (first.energy.contents == second.energy.contents).all()


def test_main_writes_three_runs(tmp_path):
    map_file = tmp_path / "map.csv"
    _write_flat_map(map_file, -274.4)
    out = tmp_path / "out"
    code = main([str(map_file), "--muons", "3", "--output-dir", str(out), "--seed", "1"])
    assert code == 0
    names = sorted(p.name for p in out.iterdir())
    assert names == [
        "cosmic_muon_simulation_0.00_0.00.csv",
        "cosmic_muon_simulation_0.00_0.05.csv",
        "cosmic_muon_simulation_90.00_0.05.csv",
    ]
    header = (out / names[0]).read_text().splitlines()[0]
    assert header == "histogram,low,high,content"


def test_main_missing_map_fails(tmp_path):
    assert main([str(tmp_path / "absent.csv"), "--output-dir", str(tmp_path)]) == 1