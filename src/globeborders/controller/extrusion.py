"""
Extrusion Mesh Builder
======================
Builds a closed solid for one ring: a bottom cap on the globe surface, a top
cap lifted by the extrusion height and the side walls between them.

Why is this file needed?
------------------------
1. Geometry: It combines the spherical projection with the planar
   triangulation of the (lon, lat) ring.
2. Fault isolation: A ring that cannot be triangulated yields an empty mesh
   instead of aborting the whole collection.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from globeborders.config import ExtrusionPolicy
from globeborders.controller.triangulator import RingTriangulator
from globeborders.model.errors import MalformedRingError, TriangulationUnavailableError
from globeborders.model.geometry_primitives import Ring, open_ring_array
from globeborders.model.mesh import Mesh, compute_vertex_normals
from globeborders.model.projection import project_ring

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def check_ring(points_2d: npt.NDArray[np.float64]) -> None:
    """Raises MalformedRingError if the open ring has fewer than 3 distinct points."""
    n_distinct = len(np.unique(points_2d, axis=0)) if len(points_2d) else 0
    if n_distinct < 3:
        raise MalformedRingError(f"Ring has {n_distinct} distinct points, at least 3 are required.")


class ExtrusionMeshBuilder:
    def __init__(
        self,
        triangulator: Optional[RingTriangulator] = None,
        policy: ExtrusionPolicy = ExtrusionPolicy.RADIAL,
    ):
        self.triangulator = triangulator or RingTriangulator()
        self.policy = policy

    def build(self, ring: Ring, radius: float, height: float) -> Mesh:
        """
        Extrudes a ring into a closed solid.

        Args:
            ring: The (lon, lat) ring; an explicit closing point is ignored.
            radius: Globe radius of the bottom cap.
            height: Extrusion height of the top cap.

        Returns:
            The solid, or an empty Mesh if the ring cannot be triangulated.
        """
        # 1. Planar ring
        pts2d = open_ring_array(ring)
        try:
            check_ring(pts2d)
        except MalformedRingError as e:
            # Not fatal: triangulation decides whether anything is produced
            logger.debug(f"Malformed ring: {e}")

        # 2. Cap triangulation
        try:
            cap = self.triangulator.triangulate(pts2d)
        except TriangulationUnavailableError as e:
            logger.warning(f"Triangulation unavailable, emitting empty mesh: {e}")
            return Mesh.empty()

        if cap.size == 0:
            logger.debug(f"Ring of {len(pts2d)} points produced no triangles.")
            return Mesh.empty()

        # 3. Base and top vertices
        n = len(pts2d)
        base = project_ring(pts2d, radius)
        top = self._top_ring(pts2d, base, radius, height)
        vertices = np.vstack((base, top))

        # 4. Indices: bottom cap, reversed top cap, walls
        indices = np.concatenate((
            cap,
            cap[::-1] + n,
            self._wall_indices(n),
        )).astype(np.int64)

        normals = compute_vertex_normals(vertices, indices)
        return Mesh(vertices=vertices, indices=indices, normals=normals)

    def _top_ring(
        self,
        pts2d: npt.NDArray[np.float64],
        base: npt.NDArray[np.float64],
        radius: float,
        height: float
    ) -> npt.NDArray[np.float64]:
        if self.policy == ExtrusionPolicy.CENTROID_NORMAL:
            centroid = base.mean(axis=0)
            norm = np.linalg.norm(centroid)
            if norm == 0.0:
                return base.copy()
            return base + centroid / norm * height

        return project_ring(pts2d, radius + height)

    @staticmethod
    def _wall_indices(n: int) -> npt.NDArray[np.int64]:
        """Two triangles per ring edge, wrapping from the last point to the first."""
        i0 = np.arange(n, dtype=np.int64)
        i1 = (i0 + 1) % n
        i2 = i0 + n
        i3 = i1 + n
        quads = np.column_stack((i0, i2, i1, i1, i2, i3))
        return quads.ravel()
