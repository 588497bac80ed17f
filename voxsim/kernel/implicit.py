"""Implicit (signed distance) lattices."""

import numpy as np


class Gyroid:
    """
    A gyroid sheet of given unit cell size and wall thickness.

    The signed distance is approximated by the gyroid level value scaled back to
    length units, which is accurate near the mid surface of the sheet.
    """

    def __init__(self, unit_size: float, wall_thickness: float) -> None:
        if unit_size <= 0 or wall_thickness <= 0:
            raise ValueError("Unit size and wall thickness of a gyroid must be positive.")
        self.unit_size = unit_size
        self.wall_thickness = wall_thickness

    @property
    def wavenumber(self):
        return 2 * np.pi / self.unit_size

    def level(self, points: np.ndarray) -> np.ndarray:
        [x, y, z] = (self.wavenumber * np.atleast_2d(points)).T
        return np.sin(x) * np.cos(y) + np.sin(y) * np.cos(z) + np.sin(z) * np.cos(x)

    def signed_distance(self, points: np.ndarray) -> np.ndarray:
        return np.abs(self.level(points)) / self.wavenumber - 0.5 * self.wall_thickness

    def __call__(self, points: np.ndarray) -> np.ndarray:
        return self.signed_distance(points)
