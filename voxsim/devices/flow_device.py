import logging

import numpy as np

from voxsim.kernel import BaseCylinder, Gyroid, LocalFrame, to_position
from voxsim.kernel.functions import ramp, transition


logger = logging.getLogger(__name__)


class SimpleFlowDevice:
    """
    Geometric input of a simple flow simulation.

    The fluid domain is a modulated cylinder with a gyroid section in its middle
    half. The solid domain is a modulated pipe around it, with flanges at both
    ends, plus the gyroid walls. The inlet patch is an oversized flat cylinder on
    the top end of the fluid domain.
    """

    inlet_radius = 20.0
    max_radius = 30.0
    outlet_radius = 15.0
    flange_thickness = 10.0
    wall_thickness = 2.0

    gyroid_unit_size = 10.0
    gyroid_wall_thickness = 1.0

    patch_thickness = 4.0
    patch_margin = 5.0

    def __init__(self, voxel_size: float, pipe_length: float = 150.0) -> None:
        self.voxel_size = voxel_size
        self.pipe_length = pipe_length
        frame = LocalFrame()

        # fluid domain: inner pipe
        inner_pipe = BaseCylinder(frame, pipe_length, self.get_inner_radius).voxelize(voxel_size)

        # fluid domain: gyroid section over the middle half
        gyroid = Gyroid(self.gyroid_unit_size, self.gyroid_wall_thickness)
        bound_radius = float(self.get_inner_radius(0.0, 0.5)) + 10.0
        bound_height = 0.5 * pipe_length
        bound_frame = frame.translated(0.5 * (pipe_length - bound_height) * frame.local_z)
        bound = BaseCylinder(bound_frame, bound_height, bound_radius).voxelize(voxel_size)
        gyroid_walls = bound.intersect_implicit(gyroid)
        self.fluid_domain = inner_pipe.subtract(gyroid_walls)

        # oversized inlet patch around the top end
        patch_radius = float(self.get_inner_radius(0.0, 1.0)) + self.patch_margin
        patch_frame = frame.translated((pipe_length - 0.5 * self.patch_thickness) * frame.local_z)
        self.inlet_patch = BaseCylinder(patch_frame, self.patch_thickness, patch_radius).voxelize(voxel_size)

        # solid domain: outer pipe without the fluid
        outer_pipe = BaseCylinder(frame, pipe_length, self.get_outer_radius).voxelize(voxel_size)
        self.solid_domain = outer_pipe.subtract(self.fluid_domain)

        logger.info(
            f"Flow device: {self.fluid_domain.nb_active} fluid voxels, "
            f"{self.solid_domain.nb_active} solid voxels, {self.inlet_patch.nb_active} inlet patch voxels.")

    def get_inner_radius(self, phi, length_ratio):
        """Radius of the fluid domain: widens from inlet to the middle, then narrows to the outlet."""
        radius = transition(self.inlet_radius, self.max_radius, ramp(length_ratio, 0.0, 0.5))
        return transition(radius, self.outlet_radius, ramp(length_ratio, 0.5, 0.5))

    def get_outer_radius(self, phi, length_ratio):
        """Radius of the solid domain: thin wall, with flanges on the first and last tenth."""
        thickness = transition(self.flange_thickness, self.wall_thickness, ramp(length_ratio, 0.0, 0.1))
        thickness = transition(thickness, self.flange_thickness, ramp(length_ratio, 0.9, 0.1))
        return self.get_inner_radius(phi, length_ratio) + thickness

    @property
    def inlet_position(self) -> np.ndarray:
        """Centre of the topmost fluid voxel on the pipe axis, which lies on the inlet surface."""
        indices = self.fluid_domain.indices()
        on_axis = indices[(indices[:, 0] == 0) & (indices[:, 1] == 0)]
        return to_position(on_axis[np.argmax(on_axis[:, 2])], self.voxel_size)
