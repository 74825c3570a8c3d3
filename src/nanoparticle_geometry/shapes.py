"""
Shape Library.

Closed-form vertex sets of common polyhedra. Each generator returns the
vertices of the solid at an arbitrary size; :func:`get_shape` scales them
uniformly so the circumradius equals the requested radius and derives the
face table from their convex hull.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable

from .numeric import Real, ScalarLike, to_real
from .shape import ConvexShape, Region, Sphere
from .vector import Vector3, norm, scale

logger = logging.getLogger(__name__)

Triple = tuple[Real, Real, Real]
VertexGenerator = Callable[[int], list[Triple]]


def golden_ratio(precision: int) -> Real:
    return (Real(5, precision).sqrt() + 1) / 2


def _reals(precision: int, *values) -> list[Real]:
    return [to_real(v, precision) for v in values]


def _sign_variants(triple: Triple) -> list[Triple]:
    """All sign flips of the non-zero components."""
    choices = [(c,) if c.is_zero() else (c, -c) for c in triple]
    return [tuple(combo) for combo in itertools.product(*choices)]


def _cyclic(triple: Triple) -> list[Triple]:
    x, y, z = triple
    return [(x, y, z), (z, x, y), (y, z, x)]


def _unique(triples: list[Triple]) -> list[Triple]:
    return list(dict.fromkeys(triples))


# =============================================================================
# Vertex generators
# =============================================================================

def tetrahedron(precision: int) -> list[Triple]:
    one = Real(1, precision)
    return [(one, one, one), (one, -one, -one), (-one, one, -one), (-one, -one, one)]


def cube(precision: int) -> list[Triple]:
    one = Real(1, precision)
    return _sign_variants((one, one, one))


def octahedron(precision: int) -> list[Triple]:
    zero, one = _reals(precision, 0, 1)
    return _unique([t for p in _cyclic((one, zero, zero)) for t in _sign_variants(p)])


def dodecahedron(precision: int) -> list[Triple]:
    phi = golden_ratio(precision)
    zero = Real(0, precision)
    shell = [t for p in _cyclic((zero, 1 / phi, phi)) for t in _sign_variants(p)]
    return cube(precision) + shell


def icosahedron(precision: int) -> list[Triple]:
    phi = golden_ratio(precision)
    zero, one = _reals(precision, 0, 1)
    return [t for p in _cyclic((zero, one, phi)) for t in _sign_variants(p)]


def cuboctahedron(precision: int) -> list[Triple]:
    zero, one = _reals(precision, 0, 1)
    return [t for p in _cyclic((one, one, zero)) for t in _sign_variants(p)]


def truncated_tetrahedron(precision: int) -> list[Triple]:
    # permutations of (±3, ±1, ±1) with an even number of minus signs
    one, three = _reals(precision, 1, 3)
    triples = []
    for p in _cyclic((three, one, one)):
        for t in _sign_variants(p):
            if sum(c.sign() < 0 for c in t) % 2 == 0:
                triples.append(t)
    return triples


def truncated_octahedron(precision: int) -> list[Triple]:
    zero, one, two = _reals(precision, 0, 1, 2)
    perms = _unique(list(itertools.permutations((zero, one, two))))
    return [t for p in perms for t in _sign_variants(p)]


def rhombic_dodecahedron(precision: int) -> list[Triple]:
    zero, two = _reals(precision, 0, 2)
    return cube(precision) + [t for p in _cyclic((two, zero, zero)) for t in _sign_variants(p)]


def icosidodecahedron(precision: int) -> list[Triple]:
    phi = golden_ratio(precision)
    zero, half = _reals(precision, 0, "0.5")
    axial = [t for p in _cyclic((zero, zero, phi)) for t in _sign_variants(p)]
    skew = [t for p in _cyclic((half, phi * half, phi * phi * half)) for t in _sign_variants(p)]
    return axial + skew


SHAPES: dict[str, VertexGenerator] = {
    "tetrahedron": tetrahedron,
    "cube": cube,
    "octahedron": octahedron,
    "dodecahedron": dodecahedron,
    "icosahedron": icosahedron,
    "cuboctahedron": cuboctahedron,
    "truncated_tetrahedron": truncated_tetrahedron,
    "truncated_octahedron": truncated_octahedron,
    "rhombic_dodecahedron": rhombic_dodecahedron,
    "icosidodecahedron": icosidodecahedron,
}


def list_shapes() -> list[str]:
    """Names accepted by :func:`get_shape`."""
    return sorted([*SHAPES, "sphere"])


def scaled_vertices(name: str, radius: Real) -> list[Vector3]:
    """Vertices of ``name`` scaled so the farthest one sits at ``radius``."""
    generator = SHAPES[name]
    vertices = [Vector3(*t) for t in generator(radius.precision)]
    factor = radius / max(norm(v) for v in vertices)
    return [scale(v, factor) for v in vertices]


def get_shape(name: str, radius: ScalarLike, precision: int | None = None) -> Region:
    """Build a named shape with the given circumradius.

    Args:
        name: One of :func:`list_shapes`
        radius: Circumradius in Å
        precision: Significant digits

    Returns:
        ConvexShape, or Sphere for ``"sphere"``

    Raises:
        KeyError: For unknown shape names
    """
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    r = to_real(radius, precision)
    if r.sign() <= 0:
        raise ValueError(f"Radius must be positive, got {radius}")
    if key == "sphere":
        return Sphere("sphere", r)
    if key not in SHAPES:
        raise KeyError(f"Unknown shape {name!r}; known shapes: {', '.join(list_shapes())}")
    logger.debug("Building %s with radius %s", key, r)
    return ConvexShape.from_vertices(key, scaled_vertices(key, r), radius=r)
