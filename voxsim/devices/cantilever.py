import logging

from voxsim.kernel import BaseBox, LocalFrame


logger = logging.getLogger(__name__)


class CantileverBeam:
    """
    A box beam clamped at one end and loaded at the other.

    The beam spans 30 along X, 10 along Y and 10 along Z. Both patches are thin
    slabs across the end faces at x = -15 (fixed) and x = +15 (loaded).
    """

    # steel
    density = 7800.0  # kg/m3
    young_modulus = 200e9  # Pa
    poisson_ratio = 0.3

    length = 30.0
    height = 10.0
    depth = 10.0
    patch_thickness = 1.0

    def __init__(self, voxel_size: float) -> None:
        self.voxel_size = voxel_size
        half_length = 0.5 * self.length

        self.solid_domain = BaseBox(LocalFrame(), self.height, self.length, self.depth).voxelize(voxel_size)

        fixed = BaseBox(LocalFrame((-half_length, 0.0, 0.0)), self.height, self.patch_thickness, self.depth)
        self.fixed_patch = fixed.voxelize(voxel_size)

        loaded = BaseBox(LocalFrame((half_length, 0.0, 0.0)), self.height, self.patch_thickness, self.depth)
        self.force_patch = loaded.voxelize(voxel_size)

        logger.info(f"Cantilever beam: {self.solid_domain.nb_active} solid voxels.")
