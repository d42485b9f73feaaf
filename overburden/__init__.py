"""Terrain overburden ray tracing and underground cosmic-muon flux estimates."""

__version__ = "0.1.0"

__all__ = ["geo", "terrain", "muon_rate", "paths", "simulation", "slant"]