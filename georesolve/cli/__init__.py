"""Command-line tools for georesolve.

- ``python -m georesolve.cli geocode DESCRIPTION`` -- extract + geocode
- ``python -m georesolve.cli resolve NAME`` -- geocode a place name
- ``python -m georesolve.cli extract DESCRIPTION`` -- extraction only
- ``python -m georesolve.cli sweep`` -- delete expired cache entries
"""
