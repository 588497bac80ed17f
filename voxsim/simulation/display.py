"""
Preview a displacement field on the mesh of a solid domain.

The mesh is displaced by the field scaled uniformly so that the largest
displacement shows up with a chosen size, and triangles are painted in bands by
their displacement magnitude.
"""

import logging

import numpy as np
import matplotlib.colors

from voxsim.kernel import Mesh, VectorField, Voxels
from voxsim.simulation.probe import estimate_max_magnitude
from voxsim.simulation import visualisation as vis


logger = logging.getLogger(__name__)


def display_scale_factor(max_display_displacement: float, max_displacement: float) -> float:
    """Uniform factor mapping the largest displacement onto the displayed size."""
    if max_displacement <= 0:
        logger.warning("The displacement field is zero everywhere; the preview stays undeformed.")
        return 0.0
    return max_display_displacement / max_displacement


def classify(values: np.ndarray, min_value: float, max_value: float, nb_classes: int) -> np.ndarray:
    """Bucket each value into one of `nb_classes` classes by its normalized position in the range."""
    if nb_classes < 2:
        raise ValueError(f"Need at least two colour classes, got {nb_classes}")
    span = max_value - min_value
    if span <= 0:
        return np.zeros(np.shape(values), dtype=int)
    ratio = np.clip((np.asarray(values) - min_value) / span, 0.0, 1.0)
    return (ratio * (nb_classes - 1)).astype(int)


class DisplacementCheck:
    """
    Displaces and paints the mesh of a solid domain according to a vector field.

    Parameters
    ----------
    solid_domain : Voxels
    displacement_field : VectorField
    max_display_displacement : float
        Size of the largest displacement in the preview.
    step : float
        Step of the probe grid estimating the largest displacement.
    nb_classes : int
        Number of colour bands.
    """

    def __init__(self, solid_domain: Voxels, displacement_field: VectorField,
                 max_display_displacement: float, step: float = 2.0, nb_classes: int = 20) -> None:
        self.mesh = Mesh.from_voxels(solid_domain)
        self.displacement_field = displacement_field
        self.nb_classes = nb_classes

        # the probe grid is independent of the mesh, so this is an estimate
        self.min_displacement = 0.0
        self.max_displacement = estimate_max_magnitude(displacement_field, solid_domain.bounding_box(), step)
        self.scale_factor = display_scale_factor(max_display_displacement, self.max_displacement)
        logger.info(
            f"Estimated max displacement {self.max_displacement:.3e}, scale factor {self.scale_factor:.3e}")

    def displacement_magnitudes(self) -> np.ndarray:
        """Magnitude at each triangle centroid; zero where the field is undefined."""
        found, values = self.displacement_field.get_values(self.mesh.centroids())
        magnitudes = np.zeros(len(found))
        magnitudes[found] = np.linalg.norm(values[found], axis=1)
        return magnitudes

    def displace(self, points: np.ndarray) -> np.ndarray:
        """Move points by the scaled field; points where the field is undefined stay."""
        found, values = self.displacement_field.get_values(points)
        moved = np.array(points, dtype=float)
        moved[found] += self.scale_factor * values[found]
        return moved

    def colour_bands(self) -> list[Mesh]:
        """Sub-meshes of the triangles sharing a colour class, displaced."""
        classes = classify(
            self.displacement_magnitudes(), self.min_displacement, self.max_displacement, self.nb_classes)
        corners = self.mesh.corners()
        bands = []
        for index in range(self.nb_classes):
            band = Mesh.from_corners(corners[classes == index])
            bands.append(band.transformed(self.displace))
        return bands

    def band_colours(self):
        cmap = vis.get_colormap()
        norm = matplotlib.colors.Normalize(self.min_displacement, max(self.max_displacement, 1e-12))
        step = (self.max_displacement - self.min_displacement) / (self.nb_classes - 1)
        return [cmap(norm(self.min_displacement + index * step)) for index in range(self.nb_classes)]

    def preview(self, ax):
        bands = self.colour_bands()
        for band, colour in zip(bands, self.band_colours()):
            vis.plot_mesh(ax, band, colour)
        vis.fit_view(ax, *bands)
        return bands
