[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "overburden"
version = "0.1.0"
description = "Rock overburden ray tracing and underground cosmic-muon flux estimates from elevation maps"
requires-python = ">=3.10"
keywords = ["cosmic rays", "muons", "overburden", "underground laboratory", "slant depth", "terrain"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
overburden-latlon = "overburden.geo:main"
overburden-simulate = "overburden.simulation:main"
overburden-slant = "overburden.slant:main"

[tool.hatch.build.targets.wheel]
packages = ["overburden"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
