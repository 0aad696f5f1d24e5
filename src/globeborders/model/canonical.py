"""
Canonical ring keys.

Two rings that trace the same boundary, in either winding order and with
float noise below the chosen precision, produce the same key. The key is a
plain string used only for equality.
"""
from __future__ import annotations

import json
from typing import List

import numpy as np

from globeborders.config import DEFAULT_KEY_PRECISION
from globeborders.model.geometry_primitives import Ring, ring_to_array


def normalize_ring(ring: Ring, precision: int = DEFAULT_KEY_PRECISION) -> Ring:
    """
    Rounds every coordinate of the ring to `precision` decimals.

    Negative zero is folded to zero so that "-0.0" and "0.0" serialise alike.
    """
    arr = np.round(ring_to_array(ring), precision) + 0.0
    return tuple((float(lon), float(lat)) for lon, lat in arr)


def _serialize(points: List[List[float]]) -> str:
    return json.dumps(points, separators=(",", ":"))


def ring_key(ring: Ring) -> str:
    """
    Direction-independent key of an already normalized ring.

    Both the forward and the reversed point order are serialised; the
    lexicographically smaller string is the key.
    """
    forward = [[lon, lat] for lon, lat in ring]
    a = _serialize(forward)
    b = _serialize(forward[::-1])
    return a if a < b else b


def canonical_key(ring: Ring, precision: int = DEFAULT_KEY_PRECISION) -> str:
    """Normalizes the ring and returns its key."""
    return ring_key(normalize_ring(ring, precision))
