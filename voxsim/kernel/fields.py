"""
Sparse scalar and vector fields.

A field holds a value for each of its active voxels and is undefined
elsewhere. Like `Voxels`, the active voxels live in a cropped block.
"""

import typing

import numpy as np

from .lattice import to_index, to_position
from .voxels import Voxels


class _ActiveField:

    nb_components: int = 0

    voxel_size: float
    origin: np.ndarray
    mask: np.ndarray
    data: np.ndarray

    def __init__(self, voxels: Voxels | None = None, default=None, *,
                 voxel_size: float | None = None) -> None:
        if voxels is None:
            if voxel_size is None:
                raise ValueError("Provide either a voxel volume or a voxel size.")
            voxels = Voxels(voxel_size)
        self.voxel_size = voxels.voxel_size
        self.origin = voxels.origin.copy()
        self.mask = voxels.mask.copy()
        self.data = np.zeros(self.mask.shape + self.value_shape, dtype=float)
        self.data[self.mask] = self._as_value(np.zeros(self.value_shape) if default is None else default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(voxel_size={self.voxel_size}, nb_active={self.nb_active})"

    @classmethod
    def from_arrays(cls, indices: np.ndarray, values: np.ndarray, voxel_size: float):
        """Build a field from active voxel indices and their values."""
        field = cls(voxel_size=voxel_size)
        field.set_values(indices, values)
        return field

    @property
    def value_shape(self) -> tuple[int, ...]:
        return (self.nb_components,) if self.nb_components else ()

    @property
    def nb_active(self):
        return int(np.count_nonzero(self.mask))

    def _as_value(self, value):
        value = np.asarray(value, dtype=float)
        if value.shape != self.value_shape:
            raise ValueError(f"Expect a value of shape {self.value_shape}, got {value.shape}")
        return value

    def active_voxels(self) -> Voxels:
        return Voxels(self.voxel_size, self.origin, self.mask)

    def indices(self):
        return np.argwhere(self.mask) + self.origin

    def values(self):
        return self.data[self.mask]

    def traverse_active(self) -> typing.Iterator[tuple[np.ndarray, typing.Any]]:
        for position, value in zip(to_position(self.indices(), self.voxel_size), self.values()):
            yield position, value

    def get_value(self, position: typing.Sequence[float]):
        """
        Look up the value at the voxel nearest to the position.

        Returns
        -------
        tuple[bool, value]
            (False, None) when that voxel is not active.
        """
        [found], values = self.get_values(np.atleast_2d(position))
        if not found:
            return False, None
        value = values[0]
        return True, (float(value) if self.nb_components == 0 else value)

    def get_values(self, positions: np.ndarray):
        """Vectorized lookup; values are NaN where the lookup fails."""
        local = to_index(np.atleast_2d(positions), self.voxel_size) - self.origin
        found = np.all((local >= 0) & (local < np.array(self.mask.shape)), axis=1)
        found[found] = self.mask[tuple(local[found].T)]
        values = np.full((len(local),) + self.value_shape, np.nan)
        values[found] = self.data[tuple(local[found].T)]
        return found, values

    def set_value(self, position: typing.Sequence[float], value):
        indices = to_index(np.atleast_2d(position), self.voxel_size)
        self.set_values(indices, self._as_value(value)[np.newaxis])

    def set_values(self, indices: np.ndarray, values: np.ndarray):
        """Activate the voxels of given indices and overwrite their values."""
        indices = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
        values = np.asarray(values, dtype=float).reshape((-1,) + self.value_shape)
        if len(indices) != len(values):
            raise ValueError(f"Got {len(indices)} indices but {len(values)} values.")
        if not len(indices):
            return
        self._reserve(indices.min(axis=0), indices.max(axis=0) + 1)
        local = tuple((indices - self.origin).T)
        self.mask[local] = True
        self.data[local] = values

    def _reserve(self, lo: np.ndarray, hi: np.ndarray):
        """Grow the block so that it covers the index range [lo, hi)."""
        shape = np.array(self.mask.shape)
        if self.nb_active == 0 and not shape.all():
            new_lo, new_hi = lo, hi
        else:
            new_lo = np.minimum(self.origin, lo)
            new_hi = np.maximum(self.origin + shape, hi)
        if np.array_equal(new_lo, self.origin) and np.array_equal(new_hi - new_lo, shape):
            return
        mask = np.zeros(tuple(new_hi - new_lo), dtype=bool)
        data = np.zeros(mask.shape + self.value_shape, dtype=float)
        start = self.origin - new_lo
        window = tuple(slice(s, s + n) for s, n in zip(start, shape))
        mask[window] = self.mask
        data[window] = self.data
        self.origin, self.mask, self.data = new_lo, mask, data


class ScalarField(_ActiveField):
    """Sparse mapping from active voxels to a real value."""

    nb_components = 0


class VectorField(_ActiveField):
    """Sparse mapping from active voxels to a 3-vector."""

    nb_components = 3


def merge_vector_fields(source: VectorField, target: VectorField):
    """
    Copy the source into the target.

    The target gains the active voxels of the source and takes the source values
    there; voxels active only in the target keep their values.
    """
    if not np.isclose(source.voxel_size, target.voxel_size):
        raise ValueError(
            f"Voxel sizes do not match: {source.voxel_size} vs {target.voxel_size}")
    target.set_values(source.indices(), source.values())
