"""
Fields derived from a domain layout.

- constant scalar fields broadcast over the active voxels of a vector field
- whole-domain vector fields with a boundary patch merged in
- a synthetic displacement field for previews
"""

import typing

import numpy as np

from voxsim.kernel import ScalarField, VectorField, Voxels, merge_vector_fields
from voxsim.kernel.functions import ramp, transition
from voxsim.simulation.errors import EmptyPatchError


def constant_scalar_field(layout: VectorField, value: float) -> ScalarField:
    """A scalar field with the same active voxels as `layout`, all set to `value`."""
    indices = layout.indices()
    return ScalarField.from_arrays(indices, np.full(len(indices), value, dtype=float), layout.voxel_size)


def patch_field(domain: Voxels, patch: Voxels, value: typing.Sequence[float],
                surface_direction: typing.Sequence[float] | None = None,
                tolerance: float = 0.0, surface_threshold: float = 0.5) -> VectorField:
    """
    A constant vector field on the part of the domain covered by an oversized patch.

    Without a surface direction every voxel of the intersection is kept;
    otherwise only the surface voxels of the intersection whose outward normal
    faces that direction within the tolerance.
    """
    region = domain.intersect(patch)
    if region.is_empty:
        raise EmptyPatchError("The patch does not overlap the domain.")
    if surface_direction is not None:
        region = region.select_surface(surface_direction, tolerance, surface_threshold)
        if region.is_empty:
            raise EmptyPatchError(
                f"No surface voxel of the patch faces the direction {list(surface_direction)}.")
    return VectorField(region, value)


def whole_domain_field(domain: Voxels, patch: VectorField,
                       default: typing.Sequence[float] = (0.0, 0.0, 0.0)) -> VectorField:
    """A field over the whole domain set to `default`, with the patch values merged in."""
    field = VectorField(domain, default)
    merge_vector_fields(patch, field)
    return field


def dummy_displacement_field(domain: Voxels) -> VectorField:
    """
    A synthetic displacement varying linearly across the bounding box.

    x goes 0 -> 20 along Y, y goes -30 -> 5 along Z, z goes 10 -> 0 along X.
    """
    bbox = domain.bounding_box()
    positions = domain.positions()
    [x_ratio, y_ratio, z_ratio] = ramp(positions, bbox.vec_min, np.where(bbox.size > 0, bbox.size, 1.0)).T
    displacement = np.column_stack([
        transition(0.0, 20.0, y_ratio),
        transition(-30.0, 5.0, z_ratio),
        transition(10.0, 0.0, x_ratio),
    ])
    return VectorField.from_arrays(domain.indices(), displacement, domain.voxel_size)
