"""
End-to-end tests of the tasks on coarse lattices.
"""

import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from voxsim.config import default_config
from voxsim.devices import SimpleFlowDevice
from voxsim.runtime import register_run
from voxsim.tasks import run_task


@pytest.fixture
def config():
    config = default_config()
    config.kernel["voxel_size"] = 1.0
    config.fluid["pipe_length"] = 40.0
    return config


def new_run(tmp_path, name):
    return register_run(name, __file__, runtime_root=tmp_path, with_hash=False)


def test_fluid_scenario(config, tmp_path, caplog):
    """Write then read the flow device; the inlet surface carries the inlet velocity."""
    caplog.set_level(logging.INFO)
    config.task["name"] = "write_fluid"
    write_run = new_run(tmp_path, "write")
    output = run_task(config, write_run)
    assert (write_run.visuals_dir / "flow_device.png").exists()
    assert "Finished task." in caplog.text

    config.task["name"] = "read_fluid"
    read_run = new_run(tmp_path, "read")
    data = run_task(config, read_run)

    inlet = SimpleFlowDevice(1.0, pipe_length=40.0).inlet_position
    found, velocity = data.velocity_field.get_value(inlet)
    assert found
    np.testing.assert_array_almost_equal(velocity, [0.0, 0.0, -1.5])
    assert data.density_field.get_value(inlet) == (True, 1000.0)
    assert data.viscosity_field.get_value(inlet) == (True, 8.97e-6)
    assert data.velocity_field.get_value((500.0, 500.0, 500.0)) == (False, None)
    assert data.fluid_domain.nb_active == output.fluid_domain.nb_active
    assert (read_run.visuals_dir / "fluid_input.png").exists()


def test_cantilever_scenario(config, tmp_path):
    config.task["name"] = "cantilever_beam"
    run_task(config, new_run(tmp_path, "write"))

    config.task["name"] = "read_mechanical"
    config.task["export_label"] = "CantileverBeam"
    data = run_task(config, new_run(tmp_path, "read"))

    np.testing.assert_array_equal(data.force_field.get_value((15.0, 0.0, 5.0))[1], [20.0, 0.0, 0.0])
    np.testing.assert_array_equal(data.displacement_field.get_value((-15.0, 0.0, 5.0))[1], [0.0, 0.0, 0.0])
    assert data.young_modulus_field.get_value((0.0, 0.0, 5.0)) == (True, 200e9)


def test_mesh_displacement(config, tmp_path):
    config.task["name"] = "mesh_displacement"
    run = new_run(tmp_path, "mesh")
    check = run_task(config, run)

    assert check.scale_factor > 0
    assert (run.visuals_dir / "mesh_displacement.png").exists()


def test_unknown_task(config, tmp_path):
    config.task["name"] = "simulate"
    with pytest.raises(ValueError, match="Unknown task"):
        run_task(config, new_run(tmp_path, "bad"))
