"""
Spherical projection of geographic coordinates.

Longitude/latitude in degrees map to Cartesian points on a sphere with the
Y axis through the poles. NaN or infinite input is not checked.
"""
from __future__ import annotations

from math import cos, pi, sin
from typing import TYPE_CHECKING, Union

import numpy as np

from globeborders.model.geometry_primitives import GeoCoordinate

if TYPE_CHECKING:
    import numpy.typing as npt


def deg2rad(degrees: float) -> float:
    return degrees * pi / 180


def project(coordinate: Union[GeoCoordinate, tuple], radius: float) -> npt.NDArray[np.float64]:
    """
    Projects a single coordinate onto a sphere.

    Args:
        coordinate: A GeoCoordinate or a (lon, lat) pair in degrees.
        radius: Sphere radius.

    Returns:
        Array of shape (3,) with the (x, y, z) position.
    """
    if isinstance(coordinate, GeoCoordinate):
        lon, lat = coordinate.lon, coordinate.lat
    else:
        lon, lat = coordinate[0], coordinate[1]

    phi = deg2rad(90.0 - lat)
    theta = deg2rad(lon + 180.0)
    return np.array([
        -radius * sin(phi) * cos(theta),
        radius * cos(phi),
        radius * sin(phi) * sin(theta),
    ])


def project_ring(coords: npt.NDArray[np.float64], radius: float) -> npt.NDArray[np.float64]:
    """
    Vectorised form of `project` for an (N, 2) array of (lon, lat).

    Returns:
        Array of shape (N, 3).
    """
    coords = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    phi = np.radians(90.0 - coords[:, 1])
    theta = np.radians(coords[:, 0] + 180.0)
    sin_phi = np.sin(phi)
    return np.column_stack((
        -radius * sin_phi * np.cos(theta),
        radius * np.cos(phi),
        radius * sin_phi * np.sin(theta),
    ))


def offset_radially(
    points: npt.NDArray[np.float64],
    radius: float,
    offset: float
) -> npt.NDArray[np.float64]:
    """
    Pushes points onto the sphere of radius `radius + offset`.

    Each point keeps its direction from the origin. Points at the origin
    stay there.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    norms = np.linalg.norm(points, axis=1, keepdims=True)
    safe = np.where(norms == 0.0, 1.0, norms)
    return points / safe * (radius + offset)
