"""
A single-file container of named volumes and fields.

On disk the container is a NumPy ``.npz`` archive. Every entry is stored as a
structured array of its active voxel indices (and values, for fields) under the
key ``<index>_<name>`` so that the order of entries survives a round trip. One
reserved member keeps the voxel size shared by all entries.
"""

import logging
import pathlib
import re
from enum import StrEnum

import numpy as np

from .fields import ScalarField, VectorField
from .voxels import Voxels


logger = logging.getLogger(__name__)


class FieldType(StrEnum):
    voxels = "Voxels"
    scalar = "ScalarField"
    vector = "VectorField"
    unknown = "Unknown"


_voxel_size_key = "voxel_size"
_entry_key = re.compile(r"(\d+)_(.*)", re.DOTALL)

_index_dtype = (np.int32, (3,))
_record_dtypes = {
    FieldType.voxels: np.dtype([("ijk", *_index_dtype)]),
    FieldType.scalar: np.dtype([("ijk", *_index_dtype), ("value", np.float64)]),
    FieldType.vector: np.dtype([("ijk", *_index_dtype), ("value", np.float64, (3,))]),
}


def classify_record(array: np.ndarray) -> FieldType:
    """Tell the kind of entry from the layout of its stored array."""
    for field_type, dtype in _record_dtypes.items():
        if array.dtype == dtype and array.ndim == 1:
            return field_type
    return FieldType.unknown


class FieldContainer:

    _entries: list[tuple[str, object]]

    def __init__(self) -> None:
        self._entries = []
        self.voxel_size = None

    def __repr__(self) -> str:
        return f"FieldContainer(nb_fields={self.field_count})"

    @property
    def field_count(self):
        return len(self._entries)

    def add(self, item: Voxels | ScalarField | VectorField, name: str) -> int:
        """Append an entry and return its index."""
        if not isinstance(item, (Voxels, ScalarField, VectorField)):
            raise TypeError(f"Cannot store an entry of type {type(item).__name__}")
        if self.voxel_size is None:
            self.voxel_size = item.voxel_size
        elif not np.isclose(self.voxel_size, item.voxel_size):
            raise ValueError(
                f"Entry '{name}' has voxel size {item.voxel_size}, the container uses {self.voxel_size}")
        self._entries.append((name, item))
        return len(self._entries) - 1

    def field_name(self, index: int) -> str:
        return self._entries[index][0]

    def field_type(self, index: int) -> FieldType:
        item = self._entries[index][1]
        if isinstance(item, Voxels):
            return FieldType.voxels
        if isinstance(item, ScalarField):
            return FieldType.scalar
        if isinstance(item, VectorField):
            return FieldType.vector
        return FieldType.unknown

    def get_voxels(self, index: int) -> Voxels:
        return self._get(index, FieldType.voxels)

    def get_scalar_field(self, index: int) -> ScalarField:
        return self._get(index, FieldType.scalar)

    def get_vector_field(self, index: int) -> VectorField:
        return self._get(index, FieldType.vector)

    def _get(self, index: int, expected: FieldType):
        actual = self.field_type(index)
        if actual != expected:
            raise TypeError(f"Field {index} '{self.field_name(index)}' is of type {actual}, not {expected}")
        return self._entries[index][1]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, path: str | pathlib.Path):
        """Write all entries to one file, overwriting any existing file."""
        path = pathlib.Path(path)
        members = {}
        if self.voxel_size is not None:
            members[_voxel_size_key] = np.array(self.voxel_size)
        for index, (name, item) in enumerate(self._entries):
            members[f"{index:04d}_{name}"] = _to_record(item, self.field_type(index))
        with open(path, "wb") as fp:
            np.savez_compressed(fp, **members)

    @classmethod
    def load(cls, path: str | pathlib.Path) -> "FieldContainer":
        container = cls()
        with np.load(pathlib.Path(path), allow_pickle=False) as archive:
            keys = list(archive.files)
            if _voxel_size_key in keys:
                container.voxel_size = float(archive[_voxel_size_key])
                keys.remove(_voxel_size_key)
            for key in sorted(keys, key=_entry_order):
                match = _entry_key.fullmatch(key)
                name = match.group(2) if match else key
                array = archive[key]
                field_type = classify_record(array)
                if field_type != FieldType.unknown and container.voxel_size is None:
                    raise ValueError(f"The file {path} does not record a voxel size.")
                container._entries.append((name, _from_record(array, field_type, container.voxel_size)))
        logger.debug(f"Read {container.field_count} entries from {path}")
        return container


def _entry_order(key: str) -> tuple[int, int]:
    """Entries by their stored index; keys without one go last."""
    match = _entry_key.fullmatch(key)
    return (0, int(match.group(1))) if match else (1, 0)


def _to_record(item, field_type: FieldType) -> np.ndarray:
    indices = item.indices()
    record = np.zeros(len(indices), dtype=_record_dtypes[field_type])
    record["ijk"] = indices
    if field_type != FieldType.voxels:
        record["value"] = item.values()
    return record


def _from_record(array: np.ndarray, field_type: FieldType, voxel_size: float | None):
    match field_type:
        case FieldType.voxels:
            return Voxels.from_indices(array["ijk"], voxel_size)
        case FieldType.scalar:
            return ScalarField.from_arrays(array["ijk"], array["value"], voxel_size)
        case FieldType.vector:
            return VectorField.from_arrays(array["ijk"], array["value"], voxel_size)
        case _:
            # kept as is, it is up to the consumer to reject it
            return array
