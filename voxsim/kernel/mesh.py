"""Triangle meshes extracted from voxel volumes."""

import typing

import numpy as np
from skimage import measure

from .lattice import to_position
from .voxels import Voxels


class Mesh:

    vertices: np.ndarray
    triangles: np.ndarray

    def __init__(self, vertices: np.ndarray | None = None, triangles: np.ndarray | None = None) -> None:
        self.vertices = np.zeros((0, 3)) if vertices is None else np.asarray(vertices, dtype=float).reshape(-1, 3)
        self.triangles = (np.zeros((0, 3), dtype=np.int64) if triangles is None
                          else np.asarray(triangles, dtype=np.int64).reshape(-1, 3))

    def __repr__(self) -> str:
        return f"Mesh(nb_vertices={len(self.vertices)}, nb_triangles={self.triangle_count})"

    @classmethod
    def from_voxels(cls, voxels: Voxels) -> "Mesh":
        """Extract the iso-surface halfway between active and inactive voxel centres."""
        if voxels.is_empty:
            return cls()
        occupancy = np.pad(voxels.mask, 1).astype(float)
        vertices, triangles, _, _ = measure.marching_cubes(
            occupancy, level=0.5, spacing=(voxels.voxel_size,) * 3)
        # the padding shifts the block by one voxel
        vertices = vertices.astype(float) + to_position(voxels.origin - 1, voxels.voxel_size)
        return cls(vertices, triangles)

    @classmethod
    def from_corners(cls, corners: np.ndarray) -> "Mesh":
        """Build a mesh from an array of triangle corners of shape (nb_triangles, 3, 3)."""
        corners = np.asarray(corners, dtype=float).reshape(-1, 3, 3)
        vertices = corners.reshape(-1, 3)
        triangles = np.arange(len(vertices)).reshape(-1, 3)
        return cls(vertices, triangles)

    @property
    def triangle_count(self):
        return len(self.triangles)

    def get_triangle(self, index: int):
        [a, b, c] = self.vertices[self.triangles[index]]
        return a, b, c

    def corners(self) -> np.ndarray:
        return self.vertices[self.triangles]

    def centroids(self) -> np.ndarray:
        return self.corners().mean(axis=1)

    def transformed(self, func: typing.Callable[[np.ndarray], np.ndarray]) -> "Mesh":
        """Apply a vectorized point transformation to every vertex."""
        return Mesh(func(self.vertices.copy()), self.triangles.copy())
