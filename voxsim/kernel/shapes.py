"""
Primitive shapes described by signed distances in a local frame.

Each shape can be voxelized onto the lattice of a given voxel size.
"""

import abc
import typing

import numpy as np

from .lattice import BBox3
from .voxels import Voxels


RadiusModulation: typing.TypeAlias = typing.Callable[[np.ndarray, np.ndarray], np.ndarray]


class LocalFrame:
    """An orthonormal frame: position plus local X, Y and Z axes."""

    def __init__(self, position: typing.Sequence[float] = (0.0, 0.0, 0.0),
                 local_z: typing.Sequence[float] = (0.0, 0.0, 1.0),
                 local_x: typing.Sequence[float] = (1.0, 0.0, 0.0)) -> None:
        z = np.asarray(local_z, dtype=float)
        z = z / np.linalg.norm(z)
        x = np.asarray(local_x, dtype=float)
        # make X orthogonal to Z
        x = x - np.dot(x, z) * z
        norm = np.linalg.norm(x)
        if norm < 1e-12:
            raise ValueError("Local X must not be parallel to local Z.")
        x = x / norm
        self.position = np.asarray(position, dtype=float)
        self.axes = np.stack([x, np.cross(z, x), z])

    @property
    def local_x(self):
        return self.axes[0]

    @property
    def local_y(self):
        return self.axes[1]

    @property
    def local_z(self):
        return self.axes[2]

    def translated(self, offset: typing.Sequence[float]) -> "LocalFrame":
        return LocalFrame(self.position + np.asarray(offset, dtype=float), self.local_z, self.local_x)

    def to_local(self, points: np.ndarray) -> np.ndarray:
        return (np.atleast_2d(points) - self.position) @ self.axes.T

    def to_world(self, points: np.ndarray) -> np.ndarray:
        return np.atleast_2d(points) @ self.axes + self.position


class BaseShape(abc.ABC):

    frame: LocalFrame

    @abc.abstractmethod
    def signed_distance(self, points: np.ndarray) -> np.ndarray:
        ...

    @abc.abstractmethod
    def local_extent(self) -> tuple[np.ndarray, np.ndarray]:
        """Lower and upper corner of the shape in its own frame."""

    def bounding_box(self) -> BBox3:
        lo, hi = self.local_extent()
        corners = np.array([[x, y, z] for x in (lo[0], hi[0]) for y in (lo[1], hi[1]) for z in (lo[2], hi[2])])
        bbox = BBox3()
        bbox.include(self.frame.to_world(corners))
        return bbox

    def voxelize(self, voxel_size: float) -> Voxels:
        bbox = self.bounding_box()
        bbox.grow(voxel_size)
        return Voxels.from_implicit(self.signed_distance, bbox, voxel_size)


class BaseBox(BaseShape):
    """
    A box growing from the frame origin along local Z by `length`.

    It is centred in local X (`width`) and local Y (`depth`). A negative length
    grows the box towards negative local Z.
    """

    def __init__(self, frame: LocalFrame, length: float, width: float, depth: float) -> None:
        self.frame = frame
        self.length = length
        self.width = width
        self.depth = depth

    def local_extent(self):
        half_x = 0.5 * abs(self.width)
        half_y = 0.5 * abs(self.depth)
        lo = np.array([-half_x, -half_y, min(0.0, self.length)])
        hi = np.array([half_x, half_y, max(0.0, self.length)])
        return lo, hi

    def signed_distance(self, points):
        lo, hi = self.local_extent()
        q = np.abs(self.frame.to_local(points) - 0.5 * (lo + hi)) - 0.5 * (hi - lo)
        outside = np.linalg.norm(np.clip(q, 0, None), axis=1)
        inside = np.minimum(q.max(axis=1), 0)
        return outside + inside


class BaseCylinder(BaseShape):
    """
    A cylinder along local Z from 0 to `length`.

    The radius is either constant or a modulation f(phi, length_ratio).
    """

    _nb_radius_samples = 64

    def __init__(self, frame: LocalFrame, length: float, radius: float | RadiusModulation = 10.0) -> None:
        if length <= 0:
            raise ValueError(f"Cylinder length must be positive, got {length}")
        self.frame = frame
        self.length = length
        self.radius = radius

    def get_radius(self, phi: np.ndarray, length_ratio: np.ndarray) -> np.ndarray:
        if callable(self.radius):
            return np.asarray(self.radius(phi, length_ratio), dtype=float)
        return np.full(np.shape(phi), float(self.radius))

    def max_radius(self):
        phi, ratio = np.meshgrid(
            np.linspace(0, 2 * np.pi, self._nb_radius_samples),
            np.linspace(0, 1, self._nb_radius_samples))
        return float(np.max(self.get_radius(phi, ratio)))

    def local_extent(self):
        r = self.max_radius()
        return np.array([-r, -r, 0.0]), np.array([r, r, self.length])

    def signed_distance(self, points):
        [x, y, z] = self.frame.to_local(points).T
        phi = np.arctan2(y, x)
        ratio = np.clip(z / self.length, 0, 1)
        radial = np.hypot(x, y) - self.get_radius(phi, ratio)
        return np.maximum.reduce([radial, -z, z - self.length])
