"""
Sparse indicator of occupied space.

The active voxels are kept in a boolean block cropped to the active region,
together with the lattice index of the block's first corner. Instances are
treated as read-only: every operation returns a new volume.
"""

import typing

import numpy as np
import scipy.ndimage as ndimage

from .lattice import BBox3, to_index, to_position


SignedDistance: typing.TypeAlias = typing.Callable[[np.ndarray], np.ndarray]

_normal_eps = 1e-9


class Voxels:

    voxel_size: float
    origin: np.ndarray
    mask: np.ndarray

    def __init__(self, voxel_size: float, origin: typing.Sequence[int] | None = None,
                 mask: np.ndarray | None = None) -> None:
        if voxel_size <= 0:
            raise ValueError(f"Voxel size must be positive, got {voxel_size}")
        self.voxel_size = float(voxel_size)
        if mask is None:
            mask = np.zeros((0, 0, 0), dtype=bool)
        if origin is None:
            origin = (0, 0, 0)
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 3:
            raise ValueError(f"Expect a 3D mask, got {mask.ndim}D")
        self.origin, self.mask = crop_block(np.asarray(origin, dtype=np.int64), mask)
        self.mask.flags.writeable = False

    def __repr__(self) -> str:
        return f"Voxels(voxel_size={self.voxel_size}, nb_active={self.nb_active})"

    @classmethod
    def from_indices(cls, indices: np.ndarray, voxel_size: float) -> "Voxels":
        indices = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
        if not len(indices):
            return cls(voxel_size)
        lo = indices.min(axis=0)
        hi = indices.max(axis=0) + 1
        mask = np.zeros(hi - lo, dtype=bool)
        mask[tuple((indices - lo).T)] = True
        return cls(voxel_size, lo, mask)

    @classmethod
    def from_implicit(cls, sdf: SignedDistance, bbox: BBox3, voxel_size: float) -> "Voxels":
        """Activate every voxel inside the box whose centre has a non-positive signed distance."""
        if bbox.is_empty:
            return cls(voxel_size)
        first, stop = bbox.index_range(voxel_size)
        shape = stop - first
        mask = np.zeros(shape, dtype=bool)

        # evaluate slab by slab to bound the memory of the sample points
        ys = to_position(np.arange(first[1], stop[1]), voxel_size)
        zs = to_position(np.arange(first[2], stop[2]), voxel_size)
        yy, zz = np.meshgrid(ys, zs, indexing="ij")
        for i in range(shape[0]):
            x = (first[0] + i) * voxel_size
            points = np.column_stack([np.full(yy.size, x), yy.ravel(), zz.ravel()])
            mask[i] = (sdf(points) <= 0).reshape(yy.shape)
        return cls(voxel_size, first, mask)

    @property
    def shape(self):
        return self.mask.shape

    @property
    def nb_active(self):
        return int(np.count_nonzero(self.mask))

    @property
    def is_empty(self):
        return self.nb_active == 0

    def indices(self):
        return np.argwhere(self.mask) + self.origin

    def positions(self):
        return to_position(self.indices(), self.voxel_size)

    def contains(self, position: typing.Sequence[float]) -> bool:
        return bool(self.contains_all(np.atleast_2d(position))[0])

    def contains_all(self, positions: np.ndarray) -> np.ndarray:
        local = to_index(positions, self.voxel_size) - self.origin
        inside = np.all((local >= 0) & (local < np.array(self.shape)), axis=1)
        result = np.zeros(len(local), dtype=bool)
        result[inside] = self.mask[tuple(local[inside].T)]
        return result

    def bounding_box(self) -> BBox3:
        """The box enclosing the outer faces of all active voxels."""
        if self.is_empty:
            return BBox3()
        half = 0.5 * self.voxel_size
        vec_min = to_position(self.origin, self.voxel_size) - half
        vec_max = to_position(self.origin + np.array(self.shape) - 1, self.voxel_size) + half
        return BBox3(vec_min, vec_max)

    # -------------------------------------------------------------------------
    # Boolean operations
    # -------------------------------------------------------------------------

    def union(self, other: "Voxels") -> "Voxels":
        origin, [a, b] = self._aligned(other)
        return Voxels(self.voxel_size, origin, a | b)

    def subtract(self, other: "Voxels") -> "Voxels":
        origin, [a, b] = self._aligned(other)
        return Voxels(self.voxel_size, origin, a & ~b)

    def intersect(self, other: "Voxels") -> "Voxels":
        origin, [a, b] = self._aligned(other)
        return Voxels(self.voxel_size, origin, a & b)

    def intersect_implicit(self, sdf: SignedDistance) -> "Voxels":
        """Keep the active voxels whose centre has a non-positive signed distance."""
        mask = np.zeros(self.shape, dtype=bool)
        for i in range(self.shape[0]):
            local = np.argwhere(self.mask[i])
            if not len(local):
                continue
            indices = np.column_stack([np.full(len(local), i), local]) + self.origin
            inside = sdf(to_position(indices, self.voxel_size)) <= 0
            mask[i][tuple(local[inside].T)] = True
        return Voxels(self.voxel_size, self.origin, mask)

    def _aligned(self, other: "Voxels"):
        """Embed both masks into one common block."""
        if not np.isclose(self.voxel_size, other.voxel_size):
            raise ValueError(
                f"Voxel sizes do not match: {self.voxel_size} vs {other.voxel_size}")
        blocks = [v for v in (self, other) if not v.is_empty]
        if not blocks:
            return np.zeros(3, dtype=np.int64), [np.zeros((0, 0, 0), dtype=bool)] * 2
        lo = np.min([v.origin for v in blocks], axis=0)
        hi = np.max([v.origin + np.array(v.shape) for v in blocks], axis=0)
        return lo, [v.embed(lo, hi - lo) for v in (self, other)]

    def embed(self, origin: np.ndarray, shape: typing.Sequence[int]) -> np.ndarray:
        """Return the occupancy on the block of given origin and shape."""
        block = np.zeros(tuple(shape), dtype=bool)
        if self.is_empty:
            return block
        start = self.origin - origin
        stop = start + np.array(self.shape)
        # clip to the target block
        src_lo = np.clip(-start, 0, None)
        src_hi = np.array(self.shape) - np.clip(stop - np.array(shape), 0, None)
        if np.any(src_hi <= src_lo):
            return block
        dst_lo = start + src_lo
        dst_hi = start + src_hi
        block[tuple(slice(l, h) for l, h in zip(dst_lo, dst_hi))] = \
            self.mask[tuple(slice(l, h) for l, h in zip(src_lo, src_hi))]
        return block

    # -------------------------------------------------------------------------
    # Surface
    # -------------------------------------------------------------------------

    def surface_voxels(self, threshold: float = 0.5) -> "Voxels":
        """
        Keep the active voxels whose centre lies within `threshold` voxels of the surface.

        The surface is taken halfway between an active and an inactive voxel centre.
        """
        if self.is_empty:
            return Voxels(self.voxel_size)
        padded = np.pad(self.mask, 1)
        distance = ndimage.distance_transform_edt(padded)[1:-1, 1:-1, 1:-1]
        return Voxels(self.voxel_size, self.origin, self.mask & (distance - 0.5 <= threshold))

    def outward_normals(self, indices: np.ndarray) -> np.ndarray:
        """Unit normals from the occupancy gradient; zero where the gradient vanishes."""
        indices = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
        padded = np.pad(self.mask, 1).astype(float)
        gradient = np.stack(np.gradient(padded), axis=-1)
        local = indices - self.origin + 1
        inside = np.all((local >= 0) & (local < np.array(padded.shape)), axis=1)
        normals = np.zeros((len(indices), 3))
        normals[inside] = -gradient[tuple(local[inside].T)]
        length = np.linalg.norm(normals, axis=1, keepdims=True)
        return np.divide(normals, length, out=np.zeros_like(normals), where=length > _normal_eps)

    def select_surface(self, direction: typing.Sequence[float] | None = None,
                       tolerance: float = 0.0, threshold: float = 0.5) -> "Voxels":
        """
        Surface voxels whose outward normal n satisfies 1 - n.d <= tolerance.

        Without a direction, every surface voxel is kept.
        """
        surface = self.surface_voxels(threshold)
        if direction is None or surface.is_empty:
            return surface
        direction = np.asarray(direction, dtype=float)
        direction = direction / np.linalg.norm(direction)
        indices = surface.indices()
        alignment = self.outward_normals(indices) @ direction
        keep = 1.0 - alignment <= tolerance + _normal_eps
        return Voxels.from_indices(indices[keep], self.voxel_size)


def crop_block(origin: np.ndarray, mask: np.ndarray):
    """Shrink a block to the extent of its active voxels."""
    if not mask.any():
        return np.zeros(3, dtype=np.int64), np.zeros((0, 0, 0), dtype=bool)
    lo, hi = [], []
    for ax in range(3):
        others = tuple(a for a in range(3) if a != ax)
        hits = np.flatnonzero(mask.any(axis=others))
        lo.append(hits[0])
        hi.append(hits[-1] + 1)
    window = tuple(slice(l, h) for l, h in zip(lo, hi))
    return origin + np.array(lo, dtype=np.int64), mask[window].copy()
