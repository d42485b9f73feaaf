# overburden

Estimate how much rock lies above an underground site, and what that means
for the cosmic-muon flux reaching it.

The package reads a terrain elevation map, projects it onto a local
northing/easting plane around a reference point, and traces straight rays
from a site through the terrain to measure the slant depth (path length
through rock) in every direction. Those depths feed a surface muon flux
parameterisation to give an underground rate.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Terrain maps

`TerrainMap` reads a CSV file of `lat,lon,elevation,dx,dy` rows, optionally
with a sixth `land` column. The layout is decided by the number of commas on
the second line of the file (`count_columns`): 4 or 5 commas are accepted,
anything else raises `MapFormatError`. Blank rows, rows starting with `#`,
short rows and rows that are not numeric (such as a header) are skipped.

Points are projected with `lat_lon_to_northing_easting` around the reference
point, by default latitude 32.597179, longitude 35.529270. Horizontal
coordinates are metres north (x) and east (y) of it; z is the elevation in
metres. An azimuth of 0 points north, π/2 east.

`TerrainMap.propagate` steps along a ray in 0.1 m steps until the ray is
above the elevation of the nearest map point, or until the nearest map point
is more than 10 km away. A ray pointing straight down raises `ValueError`;
querying an empty map raises `LookupError`.

## Library use

```python
from overburden.terrain import TerrainMap
from overburden.muon_rate import underground_flux, depth_to_mwe_rock

terrain = TerrainMap("scan_10km_step10m.csv")
start = (0.0, 0.0, -274.505)

depth = terrain.slant_depth_at(start, zenith=0.3, azimuth=1.2)
rate = underground_flux(-1, terrain, start)     # ray-traced through the map
flat = underground_flux(400.0)                  # flat overburden of 400 m rock
print(depth, rate, flat, depth_to_mwe_rock(400.0))
```

Modules:

- `overburden.geo` — `lat_lon_to_northing_easting`, `angle_from_north`,
  `angle_from_east` (angles in radians).
- `overburden.terrain` — `TerrainMap` with `load`, `nearest` (returns a
  `NearestPoint`), `propagate`, `slant_depth` and `slant_depth_at`;
  `count_columns`, `direction_from_angles`, `MapFormatError`.
- `overburden.muon_rate` — depth conversions (`depth_to_mwe`,
  `depth_to_mwe_rock`, `depth_to_gram_cm2`, `depth_to_gram_cm2_rock`,
  `depth_to_gram_cm2_water`), the Gaisser surface spectrum
  `surface_muon_flux`, the threshold energy `energy_min` (ionisation-only,
  `a * X`), and `underground_flux`, which integrates over the upper
  hemisphere on a 90 × 120 angular grid and 100 log-spaced energies from
  1 GeV to 10⁶ GeV. A positive depth means a flat overburden; otherwise a
  terrain must be given.
- `overburden.paths` — `random_upper_hemisphere_direction` and
  `generate_paths`, which traces rays in random upward directions and returns
  `PathResult` objects (direction, final point, distance, `azimuth_deg`,
  `zenith_deg`).
- `overburden.simulation` — `simulate_muons` samples muon energies
  (E⁻²·⁷ weighted, 1–1000 GeV) and cos²-distributed zenith angles, traces
  their overburden and fills `Histogram`s of energy, depth and survival
  estimate, returned as a `SimulationResult`.
- `overburden.slant` — `slant_profile` (zenith −60° to 78° in 2° steps at one
  azimuth), `slant_map` (a 180 × 100 grid of azimuth and cos(zenith), NaN
  beyond 70° from vertical), `flat_depth_curve` and `equivalent_flat_depth`
  for comparing a site with a flat-overburden depth.

## Commands

```
overburden-latlon REF_LAT REF_LON LAT LON
```
Prints the northing and easting in metres of a point relative to a reference
point, and the angles east of north and north of east in degrees.

```
overburden-simulate [MAP_FILE] [--muons N] [--output-dir DIR] [--seed S]
```
Runs the muon simulation three times: azimuth 0° ± 0.05°, 90° ± 0.05° and
the full circle. Each run is written to
`cosmic_muon_simulation_<azimuth>_<opening>.csv` in the output directory
(bin edges and contents of the energy, depth and survival histograms), and
its mean depth is printed. `MAP_FILE` defaults to `R60km_0.1.csv`.

```
overburden-slant [MAP_FILE] [--output-dir DIR]
```
Writes `slunt.csv` (north and east slant profiles), `slunt_2d.csv` (the
azimuth/cos(zenith) slant map), `get_flux.csv` (rate against flat depth in
m.w.e. for 40–1980 m of rock) and `get_flux_site.csv` (the site rate and its
equivalent flat depth), and prints the rates. `MAP_FILE` defaults to
`../mytools/scan_10km_step10m.csv`.

Run any command with `--help` for its options.

## What it does not do

The package draws no plots and writes no images: all results are returned
as Python and NumPy values or written as CSV files. It does not convert to or
from national grid coordinate systems; maps are projected with a simple
equirectangular approximation around the reference point.