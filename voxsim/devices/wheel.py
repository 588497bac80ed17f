import logging

import numpy as np

from voxsim.kernel import BaseBox, BaseCylinder, LocalFrame


logger = logging.getLogger(__name__)


class SimpleWheel:
    """
    A spoked wheel around the Z axis: hub, rim and straight spokes.

    The fixed patch is a cylinder overlapping the hub, the force patch a box
    overlapping the side of the rim at +X.
    """

    width = 20.0
    hub_radius = 8.0
    rim_inner_radius = 34.0
    rim_outer_radius = 40.0
    nb_spokes = 5
    spoke_width = 6.0
    spoke_depth = 4.0

    def __init__(self, voxel_size: float) -> None:
        self.voxel_size = voxel_size
        frame = LocalFrame()

        hub = BaseCylinder(frame, self.width, self.hub_radius).voxelize(voxel_size)
        rim = BaseCylinder(frame, self.width, self.rim_outer_radius).voxelize(voxel_size)
        rim = rim.subtract(BaseCylinder(frame, self.width, self.rim_inner_radius).voxelize(voxel_size))

        wheel = hub.union(rim)
        spoke_start = 0.5 * self.hub_radius
        spoke_length = 0.5 * (self.rim_inner_radius + self.rim_outer_radius) - spoke_start
        for phi in np.linspace(0, 2 * np.pi, self.nb_spokes, endpoint=False):
            radial = np.array([np.cos(phi), np.sin(phi), 0.0])
            spoke_frame = LocalFrame(spoke_start * radial + [0.0, 0.0, 0.5 * self.width], radial, (0.0, 0.0, 1.0))
            spoke = BaseBox(spoke_frame, spoke_length, self.spoke_width, self.spoke_depth)
            wheel = wheel.union(spoke.voxelize(voxel_size))
        self.solid_domain = wheel

        margin = 2.0
        fixed_frame = frame.translated((0.0, 0.0, -margin))
        self.fixed_patch = BaseCylinder(
            fixed_frame, self.width + 2 * margin, self.hub_radius + margin).voxelize(voxel_size)

        force_frame = frame.translated((self.rim_outer_radius, 0.0, -margin))
        self.force_patch = BaseBox(
            force_frame, self.width + 2 * margin, 2 * (self.rim_outer_radius - self.rim_inner_radius),
            10.0).voxelize(voxel_size)

        logger.info(f"Wheel: {self.solid_domain.nb_active} solid voxels.")
