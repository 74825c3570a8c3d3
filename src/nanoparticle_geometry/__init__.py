"""
Nanoparticle Geometry - Atomistic Nanoparticle Builder.

Builds atomic models of nanoparticles by intersecting a crystal lattice with
the half-spaces of a convex target shape, using arbitrary-precision
arithmetic throughout.

Example:
    >>> from nanoparticle_geometry import UnitCell, build_nanoparticle, write_mmcif
    >>>
    >>> cell = UnitCell.fcc("4.078", "Au", radii="1.44")
    >>> atoms = build_nanoparticle("cuboctahedron", "12", cell)
    >>> write_mmcif("gold.cif", atoms, cell)

    >>> # Containment on an explicit shape
    >>> from nanoparticle_geometry import Vector3, get_shape
    >>> cube = get_shape("cube", "3")
    >>> cube.contains(Vector3.of(1, 1, 1))
    True
"""

__version__ = "1.0.0"

# Errors
from .errors import (
    BuildCancelledError,
    DegenerateVectorError,
    DivideByZeroError,
    InvalidElementError,
    MalformedShapeError,
    NanoparticleGeometryError,
    PrecisionMismatchError,
)

# Numeric and vector algebra
from .numeric import Real, pi
from .vector import (
    Vector3,
    add,
    centroid,
    cross,
    divide,
    dot,
    face_normal,
    negate,
    norm,
    normalize,
    scale,
    sub,
)

# Lattice
from .lattice import BasisAtom, LatticeCursor, LatticeEnumerator, LatticeType, UnitCell

# Shapes
from .geometry import halfspace_intersection_3d, hull_faces
from .shape import ConvexShape, FaceDescriptor, Region, Sphere, contains
from .shapes import get_shape, list_shapes

# Assembly and output
from .pipeline import Atom, build_atoms, build_nanoparticle
from .mmcif import MmCifWriter, write_mmcif
from .logging_config import setup_logging

__all__ = [
    # Version
    "__version__",
    # Errors
    "NanoparticleGeometryError",
    "DegenerateVectorError",
    "DivideByZeroError",
    "PrecisionMismatchError",
    "MalformedShapeError",
    "InvalidElementError",
    "BuildCancelledError",
    # Numeric
    "Real",
    "pi",
    # Vector algebra
    "Vector3",
    "norm",
    "normalize",
    "dot",
    "cross",
    "add",
    "sub",
    "negate",
    "scale",
    "divide",
    "centroid",
    "face_normal",
    # Lattice
    "BasisAtom",
    "UnitCell",
    "LatticeType",
    "LatticeCursor",
    "LatticeEnumerator",
    # Shapes
    "ConvexShape",
    "FaceDescriptor",
    "Sphere",
    "Region",
    "contains",
    "get_shape",
    "list_shapes",
    "halfspace_intersection_3d",
    "hull_faces",
    # Assembly and output
    "Atom",
    "build_atoms",
    "build_nanoparticle",
    "MmCifWriter",
    "write_mmcif",
    "setup_logging",
]
