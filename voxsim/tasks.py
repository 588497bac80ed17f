"""
Tasks of the simulation setup: config in, container or previews out.

Helper functions translate config sections to primitives; each task builds its
inputs, runs to completion and logs "Finished task.".
"""

import logging
import typing

from voxsim.config import Config, get_task_name
from voxsim.devices import CantileverBeam, SimpleFlowDevice, SimpleWheel
from voxsim.kernel import ScalarField, VectorField, Voxels
from voxsim.runtime.dirs import RunDir
from voxsim.simulation import (
    DisplacementCheck,
    FluidSimulationInput,
    FluidSimulationOutput,
    MechanicalSimulationInput,
    MechanicalSimulationOutput,
    dummy_displacement_field,
    probe_fields,
    summarize,
)
from voxsim.simulation import visualisation as vis


logger = logging.getLogger(__name__)

fluid_label = "SimpleFluidSimulation"
mechanical_label = "SimpleMechSimulation"
cantilever_label = "CantileverBeam"


# -----------------------------------------------------------------------------
# Helpers: config -> primitives
# -----------------------------------------------------------------------------

def get_voxel_size(config: Config) -> float:
    voxel_size = float(config.kernel["voxel_size"])
    if voxel_size <= 0:
        raise ValueError(f"Voxel size must be positive, got {voxel_size}")
    return voxel_size


def get_export_label(config: Config, default: str) -> str:
    return config.task.get("export_label", default)


def build_fluid_args(config: Config) -> dict[str, float]:
    fluid = config.fluid
    return {
        "density": fluid["density"],
        "viscosity": fluid["viscosity"],
        "inlet_velocity": fluid["inlet_velocity"],
    }


def build_mechanical_args(config: Config) -> dict[str, typing.Any]:
    mechanical = config.mechanical
    return {
        "density": mechanical["density"],
        "poisson_ratio": mechanical["poisson_ratio"],
        "young_modulus": mechanical["young_modulus"],
        "applied_force": tuple(mechanical["applied_force"]),
    }


def probe_and_log(domain: Voxels, fields: dict[str, ScalarField | VectorField], config: Config):
    """Probe every field over the grown bounding box of the domain and log what was found."""
    bbox = domain.bounding_box()
    bbox.grow(config.probe["grow"])
    summary = summarize(probe_fields(bbox, fields, config.probe["step"]))
    for name in fields:
        if name not in summary:
            logger.warning(f"Probe found no value of the {name} field.")
            continue
        stats = summary[name]
        logger.info(f"Probed {name}: {stats['count']} values in [{stats['min']:.4g}, {stats['max']:.4g}]")
    return summary


def save_preview(run_dir: RunDir, name: str, layers: list[tuple[Voxels, str, float]]):
    """Draw the meshes of several volumes into one figure under the run's visuals."""
    fig, ax = vis.create_axes_3d()
    meshes = [vis.plot_voxels(ax, voxels, color, alpha) for voxels, color, alpha in layers if not voxels.is_empty]
    vis.fit_view(ax, *meshes)
    path = run_dir.visuals_dir / f"{name}.png"
    vis.save_figure(fig, path)
    logger.info(f"Saved preview {path}")
    return path


# -----------------------------------------------------------------------------
# Tasks
# -----------------------------------------------------------------------------

def write_fluid(config: Config, run_dir: RunDir):
    """Build the flow device and export its fluid simulation container."""
    device = SimpleFlowDevice(get_voxel_size(config), config.fluid["pipe_length"])
    save_preview(run_dir, "flow_device", [
        (device.fluid_domain, vis.color_fluid, vis.alpha_domain),
        (device.solid_domain, vis.color_solid, vis.alpha_domain),
        (device.inlet_patch, vis.color_patch, vis.alpha_patch),
    ])

    output = FluidSimulationOutput(
        **build_fluid_args(config),
        fluid_domain=device.fluid_domain,
        solid_domain=device.solid_domain,
        inlet_patch=device.inlet_patch)
    output.save(run_dir.export_path(get_export_label(config, fluid_label)))
    logger.info("Finished task.")
    return output


def read_fluid(config: Config, run_dir: RunDir):
    """Load the fluid container, probe its fields and preview its domains."""
    data = FluidSimulationInput(run_dir.export_path(get_export_label(config, fluid_label)))

    probe_and_log(data.fluid_domain, {
        "density": data.density_field,
        "viscosity": data.viscosity_field,
        "velocity": data.velocity_field,
    }, config)

    save_preview(run_dir, "fluid_input", [
        (data.fluid_domain, vis.color_fluid, vis.alpha_domain),
        (data.solid_domain, vis.color_solid, vis.alpha_domain),
    ])
    logger.info("Finished task.")
    return data


def _write_mechanical(config: Config, run_dir: RunDir, device, mechanical_args: dict, label: str, preview_name: str):
    save_preview(run_dir, preview_name, [
        (device.solid_domain, vis.color_solid, vis.alpha_domain),
        (device.fixed_patch, vis.color_fixed, vis.alpha_patch),
        (device.force_patch, vis.color_force, vis.alpha_patch),
    ])
    output = MechanicalSimulationOutput(
        **mechanical_args,
        solid_domain=device.solid_domain,
        fixed_patch=device.fixed_patch,
        force_patch=device.force_patch)
    output.save(run_dir.export_path(get_export_label(config, label)))
    logger.info("Finished task.")
    return output


def write_mechanical(config: Config, run_dir: RunDir):
    """Build the wheel and export its mechanical simulation container."""
    wheel = SimpleWheel(get_voxel_size(config))
    return _write_mechanical(config, run_dir, wheel, build_mechanical_args(config), mechanical_label, "wheel")


def cantilever_beam(config: Config, run_dir: RunDir):
    """Export the mechanical simulation container of a steel cantilever beam."""
    beam = CantileverBeam(get_voxel_size(config))
    args = build_mechanical_args(config)
    # the beam is always steel
    args.update(density=beam.density, poisson_ratio=beam.poisson_ratio, young_modulus=beam.young_modulus)
    return _write_mechanical(config, run_dir, beam, args, cantilever_label, "cantilever_beam")


def read_mechanical(config: Config, run_dir: RunDir):
    """Load the mechanical container, probe its fields and preview its domain."""
    data = MechanicalSimulationInput(run_dir.export_path(get_export_label(config, mechanical_label)))

    probe_and_log(data.solid_domain, {
        "displacement": data.displacement_field,
        "force": data.force_field,
        "density": data.density_field,
        "young's modulus": data.young_modulus_field,
        "poisson's ratio": data.poisson_ratio_field,
    }, config)

    save_preview(run_dir, "mechanical_input", [
        (data.solid_domain, vis.color_solid, vis.alpha_domain),
    ])
    logger.info("Finished task.")
    return data


def mesh_displacement(config: Config, run_dir: RunDir):
    """Preview a synthetic displacement field on the wheel mesh in colour bands."""
    wheel = SimpleWheel(get_voxel_size(config))
    displacement = dummy_displacement_field(wheel.solid_domain)

    display = config.display
    check = DisplacementCheck(
        wheel.solid_domain, displacement, display["max_displacement"],
        step=display["step"], nb_classes=display["nb_classes"])

    fig, ax = vis.create_axes_3d()
    check.preview(ax)
    path = run_dir.visuals_dir / "mesh_displacement.png"
    vis.save_figure(fig, path)
    logger.info(f"Saved preview {path}")
    logger.info("Finished task.")
    return check


TASKS: dict[str, typing.Callable[[Config, RunDir], typing.Any]] = {
    "write_fluid": write_fluid,
    "read_fluid": read_fluid,
    "write_mechanical": write_mechanical,
    "read_mechanical": read_mechanical,
    "mesh_displacement": mesh_displacement,
    "cantilever_beam": cantilever_beam,
}


def run_task(config: Config, run_dir: RunDir):
    """Run the one task named in the config."""
    name = get_task_name(config)
    try:
        task = TASKS[name]
    except KeyError:
        raise ValueError(f"Unknown task '{name}'. Choose one of {sorted(TASKS)}.") from None
    logger.info(f"Running task '{name}' with voxel size {get_voxel_size(config)}")
    return task(config, run_dir)
