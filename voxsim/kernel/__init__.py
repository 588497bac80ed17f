"""
Voxel geometry kernel.

Provides:
- Voxels: sparse indicator of occupied space with Boolean operations
- ScalarField, VectorField: sparse fields on active voxels
- Shapes and implicit lattices to construct volumes
- Mesh: iso-surface extraction for previews
- FieldContainer: single-file storage of named volumes and fields
"""

from .lattice import BBox3, to_index, to_position
from .voxels import Voxels
from .fields import ScalarField, VectorField, merge_vector_fields
from .implicit import Gyroid
from .shapes import LocalFrame, BaseShape, BaseBox, BaseCylinder
from .mesh import Mesh
from .container import FieldContainer, FieldType
