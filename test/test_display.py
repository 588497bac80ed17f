"""
Tests for the displacement preview.
"""

import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from voxsim.kernel import BaseBox, LocalFrame, Mesh, VectorField, Voxels
from voxsim.simulation import DisplacementCheck, display_scale_factor, dummy_displacement_field
from voxsim.simulation import visualisation as vis
from voxsim.simulation.display import classify


@pytest.fixture
def block():
    return BaseBox(LocalFrame(), 4.0, 6.0, 4.0).voxelize(1.0)


def test_display_scale_factor(caplog):
    assert display_scale_factor(10.0, 5.0) == 2.0
    with caplog.at_level(logging.WARNING):
        assert display_scale_factor(10.0, 0.0) == 0.0
    assert "zero everywhere" in caplog.text


def test_classify_clamps_to_range():
    classes = classify(np.array([-1.0, 0.0, 0.5, 1.0, 2.0]), 0.0, 1.0, 20)
    np.testing.assert_array_equal(classes, [0, 0, 9, 19, 19])


def test_classify_degenerate_range():
    np.testing.assert_array_equal(classify(np.array([3.0, 3.0]), 3.0, 3.0, 20), [0, 0])
    with pytest.raises(ValueError):
        classify(np.array([0.0]), 0.0, 1.0, 1)


def test_mesh_of_single_voxel():
    mesh = Mesh.from_voxels(Voxels.from_indices([[2, 0, 0]], 0.5))

    assert mesh.triangle_count > 0
    np.testing.assert_array_almost_equal(mesh.vertices.min(axis=0), [0.75, -0.25, -0.25])
    np.testing.assert_array_almost_equal(mesh.vertices.max(axis=0), [1.25, 0.25, 0.25])


def test_dummy_displacement_field():
    """Each component is linear in one bounding-box ratio."""
    cube = Voxels.from_indices(np.argwhere(np.ones((11, 11, 11), dtype=bool)), 1.0)
    field = dummy_displacement_field(cube)

    assert field.nb_active == cube.nb_active
    # voxel centres sit half a voxel inside the bounding box of size 11
    low = 0.5 / 11
    np.testing.assert_array_almost_equal(
        field.get_value((0.0, 0.0, 0.0))[1], [20.0 * low, -30.0 + 35.0 * low, 10.0 - 10.0 * low])
    np.testing.assert_array_almost_equal(
        field.get_value((10.0, 10.0, 10.0))[1], [20.0 * (1 - low), 5.0 - 35.0 * low, 10.0 * low])


def test_displacement_check(block, tmp_path):
    displacement = dummy_displacement_field(block)
    check = DisplacementCheck(block, displacement, 10.0, step=2.0, nb_classes=20)

    assert check.max_displacement > 0
    assert check.scale_factor == pytest.approx(10.0 / check.max_displacement)

    bands = check.colour_bands()
    assert len(bands) == 20
    assert sum(band.triangle_count for band in bands) == check.mesh.triangle_count
    assert len(check.band_colours()) == 20

    fig, ax = vis.create_axes_3d()
    assert len(check.preview(ax)) == 20
    path = tmp_path / "preview.png"
    vis.save_figure(fig, path)
    assert path.exists()


def test_zero_displacement_keeps_mesh(block):
    check = DisplacementCheck(block, VectorField(block, (0.0, 0.0, 0.0)), 10.0)

    assert check.scale_factor == 0.0
    vertices = check.mesh.vertices
    np.testing.assert_array_equal(check.displace(vertices), vertices)
