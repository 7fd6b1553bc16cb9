"""georesolve: cached resolution of disaster descriptions to coordinates."""

__version__ = "0.1.0"
