"""
Tests for the bounding-box probe.
"""

import numpy as np

from voxsim.kernel import BBox3, ScalarField, VectorField, Voxels
from voxsim.simulation import estimate_max_magnitude, probe_fields, probe_grid, summarize
from voxsim.simulation.probe import probe_axis


def test_probe_axis_covers_both_ends():
    np.testing.assert_array_almost_equal(probe_axis(0.0, 4.0, 2.0), [0.0, 2.0, 4.0])
    # the last point may overshoot by less than a step
    np.testing.assert_array_almost_equal(probe_axis(0.0, 5.0, 2.0), [0.0, 2.0, 4.0, 6.0])
    np.testing.assert_array_almost_equal(probe_axis(1.0, 1.0, 2.0), [1.0])


def test_probe_grid_order():
    """Z is the outermost loop, then X, then Y."""
    points = probe_grid(BBox3((0.0, 0.0, 0.0), (2.0, 2.0, 2.0)), 2.0)

    assert points.shape == (8, 3)
    np.testing.assert_array_equal(points[:5], [
        [0.0, 0.0, 0.0],
        [0.0, 2.0, 0.0],
        [2.0, 0.0, 0.0],
        [2.0, 2.0, 0.0],
        [0.0, 0.0, 2.0],
    ])


def test_probe_grid_of_empty_box():
    assert probe_grid(BBox3(), 1.0).shape == (0, 3)


def test_probe_fields_skips_failed_queries():
    density = ScalarField(Voxels.from_indices([[0, 0, 0]], 1.0), 1.0)
    velocity = VectorField(Voxels.from_indices([[2, 0, 0]], 1.0), (0.0, 0.0, -1.0))
    bbox = BBox3((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))

    samples = list(probe_fields(bbox, {"density": density, "velocity": velocity}, 2.0))

    assert len(samples) == 2
    assert samples[0].values == {"density": 1.0}
    np.testing.assert_array_equal(samples[0].position, [0.0, 0.0, 0.0])
    assert list(samples[1].values) == ["velocity"]
    np.testing.assert_array_equal(samples[1].values["velocity"], [0.0, 0.0, -1.0])


def test_estimate_max_magnitude():
    field = VectorField.from_arrays([[0, 0, 0], [2, 0, 0]], [[3.0, 4.0, 0.0], [1.0, 0.0, 0.0]], 1.0)
    bbox = BBox3((0.0, 0.0, 0.0), (2.0, 0.0, 0.0))

    assert estimate_max_magnitude(field, bbox, 2.0) == 5.0
    # the grid misses both voxels
    assert estimate_max_magnitude(field, BBox3((10.0, 0.0, 0.0), (12.0, 0.0, 0.0)), 2.0) == 0.0


def test_summarize():
    field = ScalarField.from_arrays([[0, 0, 0], [1, 0, 0], [2, 0, 0]], [1.0, 5.0, 3.0], 1.0)
    bbox = BBox3((0.0, 0.0, 0.0), (2.0, 0.0, 0.0))

    summary = summarize(probe_fields(bbox, {"density": field}, 1.0))
    assert summary == {"density": {"count": 3, "min": 1.0, "max": 5.0}}
