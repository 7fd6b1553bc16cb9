"""Concrete adapters for every interface in ``georesolve.interfaces``."""
