"""GIS interchange formats for SP1 point data.

Modules:
 - geojson: SP1Data -> GeoJSON FeatureCollection
 - csv_table: SP1Data <-> plain CSV point table
"""

__all__ = [
    "csv_table",
    "geojson",
]
