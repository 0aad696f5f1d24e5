"""
Ring Triangulation (earcut Adapter)
===================================
Ear-clipping triangulation of a single planar ring.

Why is this file needed?
------------------------
The extrusion builder only needs "points in, index triples out". This
adapter hides the earcut API and turns every way it can go wrong into a
single TriangulationUnavailableError that the builder handles per ring.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import mapbox_earcut as earcut
import numpy as np

from globeborders.model.errors import TriangulationUnavailableError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class RingTriangulator:
    """Triangulates a simple 2D ring into a flat array of vertex indices."""

    def triangulate(self, points_2d: npt.NDArray[np.float64]) -> npt.NDArray[np.int64]:
        """
        Args:
            points_2d: (N, 2) array of ring points, without a closing duplicate.

        Returns:
            Flat array of length 3*T with indices into `points_2d`.
            Rings with fewer than 3 points yield an empty array.

        Raises:
            TriangulationUnavailableError: If earcut fails or returns indices
                that are not valid triangles of the input.
        """
        coords = np.ascontiguousarray(points_2d, dtype=np.float64).reshape(-1, 2)
        n = coords.shape[0]
        if n < 3:
            return np.empty(0, dtype=np.int64)

        ring_end = np.array([n], dtype=np.uint32)
        try:
            raw = earcut.triangulate_float64(coords, ring_end)
        except Exception as e:
            raise TriangulationUnavailableError(f"earcut failed on a ring of {n} points: {e}") from e

        indices = np.asarray(raw, dtype=np.int64).ravel()
        if indices.size % 3 != 0:
            raise TriangulationUnavailableError(
                f"earcut returned {indices.size} indices, not a multiple of 3."
            )
        if indices.size and (indices.min() < 0 or indices.max() >= n):
            raise TriangulationUnavailableError("earcut returned indices outside the ring.")

        return indices
