"""
Extruded country borders on a 3D globe.

Turns a parsed GeoJSON feature collection into extruded region solids on a
sphere and a deduplicated index of internal border lines.
"""
