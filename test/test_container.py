"""
Tests for the single-file container of volumes and fields.
"""

import numpy as np
import pytest

from voxsim.kernel import FieldContainer, FieldType, ScalarField, VectorField, Voxels


@pytest.fixture
def volume():
    return Voxels.from_indices([[0, 0, 0], [1, 0, 0], [1, 2, -3]], 0.25)


@pytest.fixture
def container(volume):
    container = FieldContainer()
    container.add(volume, "Domain")
    container.add(VectorField(volume, (0.5, -1.0, 2.0)), "Velocity")
    container.add(ScalarField(volume, 998.2), "Density")
    return container


def test_add_returns_index(volume):
    container = FieldContainer()
    assert container.add(volume, "a") == 0
    assert container.add(ScalarField(volume, 1.0), "b") == 1
    assert container.field_count == 2


def test_field_types(container):
    assert [container.field_type(i) for i in range(3)] == [FieldType.voxels, FieldType.vector, FieldType.scalar]
    assert container.field_name(1) == "Velocity"


def test_typed_getter_mismatch(container):
    with pytest.raises(TypeError):
        container.get_scalar_field(0)
    with pytest.raises(TypeError):
        container.get_voxels(2)


def test_add_rejects_foreign_items(volume):
    container = FieldContainer()
    with pytest.raises(TypeError):
        container.add(np.zeros(3), "raw")
    container.add(volume, "Domain")
    with pytest.raises(ValueError):
        container.add(Voxels.from_indices([[0, 0, 0]], 1.0), "Other")


def test_save_and_load(container, volume, tmp_path):
    """Entries come back in order, with their names, kinds and values."""
    path = tmp_path / "fields.npz"
    container.save(path)
    loaded = FieldContainer.load(path)

    assert loaded.field_count == 3
    assert loaded.voxel_size == 0.25
    assert [loaded.field_name(i) for i in range(3)] == ["Domain", "Velocity", "Density"]
    assert sorted(map(tuple, loaded.get_voxels(0).indices())) == sorted(map(tuple, volume.indices()))

    velocity = loaded.get_vector_field(1)
    for position, value in container.get_vector_field(1).traverse_active():
        found, loaded_value = velocity.get_value(position)
        assert found
        np.testing.assert_array_equal(loaded_value, value)

    density = loaded.get_scalar_field(2)
    assert density.get_value((0.25, 0.5, -0.75)) == (True, 998.2)


def test_save_overwrites(container, volume, tmp_path):
    path = tmp_path / "fields.npz"
    container.save(path)

    smaller = FieldContainer()
    smaller.add(volume, "Only")
    smaller.save(path)

    assert FieldContainer.load(path).field_count == 1


def test_unknown_layout_is_kept_as_unknown(tmp_path):
    path = tmp_path / "foreign.npz"
    np.savez(path, voxel_size=np.array(1.0), **{"0000_Grid": np.zeros((4, 4))})

    loaded = FieldContainer.load(path)
    assert loaded.field_count == 1
    assert loaded.field_type(0) == FieldType.unknown
    assert loaded.field_name(0) == "Grid"


def test_load_follows_stored_index(container, tmp_path):
    """Entries load by their index prefix, whatever the member order in the archive."""
    path = tmp_path / "fields.npz"
    container.save(path)
    with np.load(path, allow_pickle=False) as archive:
        members = {key: archive[key] for key in reversed(archive.files)}
    shuffled = tmp_path / "shuffled.npz"
    np.savez(shuffled, **members)

    loaded = FieldContainer.load(shuffled)
    assert [loaded.field_name(i) for i in range(3)] == ["Domain", "Velocity", "Density"]
    assert [loaded.field_type(i) for i in range(3)] == [FieldType.voxels, FieldType.vector, FieldType.scalar]


def test_index_prefix_beyond_four_digits(tmp_path):
    path = tmp_path / "many.npz"
    record = np.zeros(1, dtype=[("ijk", np.int32, (3,))])
    np.savez(path, voxel_size=np.array(0.25), **{"10000_Late": record, "0002_Early": record})

    loaded = FieldContainer.load(path)
    assert [loaded.field_name(i) for i in range(2)] == ["Early", "Late"]
    assert loaded.field_type(1) == FieldType.voxels
