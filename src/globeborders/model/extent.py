"""
Angular extent of rings and detection of global-wrap artifacts.

A ring whose longitudes, normalized into [0, 360), span more than the
threshold effectively encircles the planet. Such rings come from
antimeridian defects in the dataset and are never classified as shared.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from globeborders.config import DEFAULT_WRAP_THRESHOLD_DEGREES
from globeborders.model.geometry_primitives import Ring, ring_to_array


@dataclass(frozen=True)
class AngularExtent:
    lon_span: float
    lat_span: float


def angular_extent(ring: Ring) -> AngularExtent:
    """
    Longitude and latitude span of a ring in degrees.

    Negative longitudes are shifted by +360 before min/max, so a ring that
    straddles the prime meridian with points on both sides reports a wide span.
    An empty ring has zero extent.
    """
    arr = ring_to_array(ring)
    if arr.size == 0:
        return AngularExtent(0.0, 0.0)

    lons = np.where(arr[:, 0] < 0.0, arr[:, 0] + 360.0, arr[:, 0])
    lats = arr[:, 1]
    return AngularExtent(
        lon_span=float(lons.max() - lons.min()),
        lat_span=float(lats.max() - lats.min()),
    )


def is_global_wrap(ring: Ring, threshold: float = DEFAULT_WRAP_THRESHOLD_DEGREES) -> bool:
    """True when the ring's longitude span exceeds `threshold` degrees."""
    return angular_extent(ring).lon_span > threshold
