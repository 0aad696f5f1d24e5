"""
Geographic Primitives.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

# A ring as supplied by the dataset: ((lon, lat), ...), implicitly closed.
Ring = Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class GeoCoordinate:
    """A geographic position in degrees. Latitude lies in [-90, 90]."""
    lon: float
    lat: float


def as_ring(points: Iterable[Sequence[float]]) -> Ring:
    """
    Freeze raw [lon, lat] pairs into an immutable Ring.

    Extra ordinates (altitude) are dropped. The point order and any explicit
    closing point are kept exactly as given, since canonical keys depend on them.
    """
    return tuple((float(p[0]), float(p[1])) for p in points)


def ring_to_array(ring: Ring) -> npt.NDArray[np.float64]:
    """Converts a Ring to an (N, 2) array of (lon, lat)."""
    if not ring:
        return np.empty((0, 2), dtype=np.float64)
    return np.asarray(ring, dtype=np.float64).reshape(-1, 2)


def open_ring_array(ring: Ring) -> npt.NDArray[np.float64]:
    """
    Returns the ring as an (N, 2) array without an explicit closing point.

    GeoJSON rings repeat the first position at the end; geometry builders
    treat every ring as implicitly closed and must not see that duplicate.
    """
    arr = ring_to_array(ring)
    if len(arr) > 1 and np.array_equal(arr[0], arr[-1]):
        arr = arr[:-1]
    return arr


def reverse_ring(ring: Ring) -> Ring:
    return tuple(reversed(ring))
