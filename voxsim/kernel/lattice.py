"""
The cubic lattice shared by all volumes and fields.

A voxel with index (i, j, k) has its centre at (i, j, k) * voxel_size.
"""

import typing

import numpy as np


def to_index(positions: np.ndarray, voxel_size: float) -> np.ndarray:
    """Return the index of the voxel nearest to each position."""
    return np.rint(np.asarray(positions, dtype=float) / voxel_size).astype(np.int64)


def to_position(indices: np.ndarray, voxel_size: float) -> np.ndarray:
    """Return the centre of each voxel."""
    return np.asarray(indices, dtype=float) * voxel_size


class BBox3:
    """An axis-aligned bounding box in world coordinates."""

    vec_min: np.ndarray
    vec_max: np.ndarray

    def __init__(self, vec_min: typing.Sequence[float] | None = None,
                 vec_max: typing.Sequence[float] | None = None) -> None:
        # an empty box has min > max so that including a point fixes both ends
        self.vec_min = np.full(3, np.inf) if vec_min is None else np.array(vec_min, dtype=float)
        self.vec_max = np.full(3, -np.inf) if vec_max is None else np.array(vec_max, dtype=float)

    def __repr__(self) -> str:
        return f"BBox3(vec_min={self.vec_min.tolist()}, vec_max={self.vec_max.tolist()})"

    @property
    def is_empty(self):
        return bool(np.any(self.vec_min > self.vec_max))

    @property
    def size(self):
        return self.vec_max - self.vec_min

    @property
    def center(self):
        return 0.5 * (self.vec_min + self.vec_max)

    def include(self, points: np.ndarray):
        points = np.atleast_2d(points)
        self.vec_min = np.minimum(self.vec_min, points.min(axis=0))
        self.vec_max = np.maximum(self.vec_max, points.max(axis=0))

    def grow(self, distance: float):
        self.vec_min = self.vec_min - distance
        self.vec_max = self.vec_max + distance

    def index_range(self, voxel_size: float) -> tuple[np.ndarray, np.ndarray]:
        """Return the first and one-past-last voxel index whose centres cover the box."""
        first = np.floor(self.vec_min / voxel_size).astype(np.int64)
        last = np.ceil(self.vec_max / voxel_size).astype(np.int64)
        return first, last + 1
