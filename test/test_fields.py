"""
Tests for sparse scalar and vector fields.
"""

import numpy as np
import pytest

from voxsim.kernel import ScalarField, VectorField, Voxels, merge_vector_fields


@pytest.fixture
def domain():
    indices = np.argwhere(np.ones((4, 3, 2), dtype=bool))
    return Voxels.from_indices(indices, 0.5)


@pytest.fixture
def patch():
    indices = np.argwhere(np.ones((2, 5, 2), dtype=bool)) + [3, 0, 0]
    return Voxels.from_indices(indices, 0.5)


def test_field_with_default(domain):
    field = VectorField(domain, (1.0, 2.0, 3.0))

    assert field.nb_active == domain.nb_active
    found, value = field.get_value((0.5, 0.5, 0.0))
    assert found
    np.testing.assert_array_equal(value, [1.0, 2.0, 3.0])


def test_failed_lookup(domain):
    field = ScalarField(domain, 2.0)

    assert field.get_value((10.0, 10.0, 10.0)) == (False, None)
    found, values = field.get_values(np.array([[0.0, 0.0, 0.0], [-5.0, 0.0, 0.0]]))
    np.testing.assert_array_equal(found, [True, False])
    assert values[0] == 2.0
    assert np.isnan(values[1])


def test_scalar_value_is_a_float(domain):
    found, value = ScalarField(domain, 7.5).get_value((0.0, 0.0, 0.0))
    assert found
    assert isinstance(value, float)
    assert value == 7.5


def test_set_value_grows_an_empty_field():
    field = VectorField(voxel_size=1.0)
    assert field.nb_active == 0

    field.set_value((5.0, 5.0, 5.0), (1.0, 0.0, 0.0))
    field.set_value((-2.0, 0.0, 1.0), (0.0, 1.0, 0.0))

    assert field.nb_active == 2
    np.testing.assert_array_equal(field.get_value((5.0, 5.0, 5.0))[1], [1.0, 0.0, 0.0])
    np.testing.assert_array_equal(field.get_value((-2.0, 0.0, 1.0))[1], [0.0, 1.0, 0.0])
    assert not field.get_value((0.0, 0.0, 0.0))[0]


def test_vector_field_without_default(domain):
    empty = VectorField(voxel_size=1.0)
    assert empty.nb_active == 0

    zeros = VectorField(domain)
    assert zeros.nb_active == domain.nb_active
    np.testing.assert_array_equal(zeros.values(), np.zeros((domain.nb_active, 3)))

    indices = np.array([[0, 0, 0], [2, -1, 4]])
    values = np.array([[1.0, 2.0, 3.0], [-0.5, 0.0, 0.25]])
    field = VectorField.from_arrays(indices, values, 0.5)
    assert field.nb_active == 2
    np.testing.assert_array_equal(field.get_value((1.0, -0.5, 2.0))[1], [-0.5, 0.0, 0.25])
    np.testing.assert_array_equal(field.get_value((0.0, 0.0, 0.0))[1], [1.0, 2.0, 3.0])


def test_value_shape_is_checked(domain):
    with pytest.raises(ValueError):
        VectorField(domain, 1.0)


def test_traverse_active(domain):
    field = ScalarField(domain, 3.0)
    visited = list(field.traverse_active())

    assert len(visited) == domain.nb_active
    for position, value in visited:
        assert domain.contains(position)
        assert value == 3.0


def test_merge_into_default_field(domain, patch):
    """Patch values win where the patch is active, defaults stay elsewhere."""
    target = VectorField(domain, (0.0, 0.0, 0.0))
    source = VectorField(domain.intersect(patch), (1.0, 2.0, 3.0))
    merge_vector_fields(source, target)

    assert target.nb_active == domain.nb_active
    for position, value in target.traverse_active():
        expected = [1.0, 2.0, 3.0] if patch.contains(position) else [0.0, 0.0, 0.0]
        np.testing.assert_array_equal(value, expected)


def test_merge_is_not_commutative(domain, patch):
    inside = domain.intersect(patch)

    target = VectorField(domain, (0.0, 0.0, 0.0))
    merge_vector_fields(VectorField(inside, (1.0, 1.0, 1.0)), target)

    reverse = VectorField(inside, (1.0, 1.0, 1.0))
    merge_vector_fields(VectorField(domain, (0.0, 0.0, 0.0)), reverse)

    position = inside.positions()[0]
    np.testing.assert_array_equal(target.get_value(position)[1], [1.0, 1.0, 1.0])
    np.testing.assert_array_equal(reverse.get_value(position)[1], [0.0, 0.0, 0.0])


def test_merge_keeps_target_only_voxels(domain, patch):
    target = VectorField(domain, (4.0, 0.0, 0.0))
    merge_vector_fields(VectorField(patch, (1.0, 0.0, 0.0)), target)

    # the target gains the voxels of the source outside the domain
    assert target.nb_active == domain.union(patch).nb_active
    np.testing.assert_array_equal(target.get_value((0.0, 0.0, 0.0))[1], [4.0, 0.0, 0.0])


def test_merge_voxel_size_mismatch(domain):
    other = VectorField(Voxels.from_indices([[0, 0, 0]], 1.0))
    with pytest.raises(ValueError):
        merge_vector_fields(other, VectorField(domain))
