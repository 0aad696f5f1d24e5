"""
Triangle Mesh Container.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def _empty_points() -> npt.NDArray[np.float64]:
    return np.empty((0, 3), dtype=np.float64)


def _empty_indices() -> npt.NDArray[np.int64]:
    return np.empty(0, dtype=np.int64)


@dataclass
class Mesh:
    """
    An indexed triangle soup.

    `indices` is flat: every consecutive triple is one triangle.
    `normals` has one unit vector per vertex (zero for unused vertices).
    """
    vertices: npt.NDArray[np.float64] = field(default_factory=_empty_points)
    indices: npt.NDArray[np.int64] = field(default_factory=_empty_indices)
    normals: npt.NDArray[np.float64] = field(default_factory=_empty_points)

    @classmethod
    def empty(cls) -> Mesh:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.indices.size == 0

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_triangles(self) -> int:
        return int(self.indices.size // 3)

    @property
    def faces(self) -> npt.NDArray[np.int64]:
        """Indices reshaped to (T, 3)."""
        return self.indices.reshape(-1, 3)


def compute_vertex_normals(
    vertices: npt.NDArray[np.float64],
    indices: npt.NDArray[np.int64]
) -> npt.NDArray[np.float64]:
    """
    Per-vertex normals from face normal accumulation.

    Unnormalized face normals (length proportional to triangle area) are summed
    onto each corner vertex, then every sum is normalized. Vertices that belong
    to no triangle, or whose sum cancels out, get a zero normal.
    """
    normals = np.zeros_like(vertices, dtype=np.float64)
    if indices.size == 0:
        return normals

    faces = indices.reshape(-1, 3)
    a = vertices[faces[:, 0]]
    b = vertices[faces[:, 1]]
    c = vertices[faces[:, 2]]
    face_normals = np.cross(b - a, c - a)

    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    np.divide(normals, lengths, out=normals, where=lengths > 0.0)
    return normals
