"""
Vector Algebra.

Pure operations on 3-component arbitrary-precision vectors, plus the
outward face-normal derivation used to build face tables.

All functions return new vectors; none mutate their arguments. Operands must
share one precision, mismatches raise ``PrecisionMismatchError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from .errors import DegenerateVectorError, DivideByZeroError, MalformedShapeError
from .numeric import Real, ScalarLike, common_precision, to_real


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable triple of Reals sharing one precision."""

    x: Real
    y: Real
    z: Real

    def __post_init__(self):
        common_precision(self.x, self.y, self.z)

    @classmethod
    def of(cls, x: ScalarLike, y: ScalarLike, z: ScalarLike,
           precision: int | None = None) -> Vector3:
        """Build a vector from plain numbers or strings.

        Args:
            x, y, z: Components; Reals are kept as they are
            precision: Digits for components that still need parsing

        Returns:
            Vector3
        """
        if precision is None:
            for c in (x, y, z):
                if isinstance(c, Real):
                    precision = c.precision
                    break
        return cls(to_real(x, precision), to_real(y, precision), to_real(z, precision))

    @classmethod
    def zero(cls, precision: int | None = None) -> Vector3:
        return cls.of(0, 0, 0, precision)

    @property
    def precision(self) -> int:
        return self.x.precision

    def __iter__(self) -> Iterator[Real]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> Real:
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: Vector3) -> Vector3:
        return add(self, other)

    def __sub__(self, other: Vector3) -> Vector3:
        return sub(self, other)

    def __neg__(self) -> Vector3:
        return negate(self)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def to_array(self) -> np.ndarray:
        """Float64 copy for numpy/scipy consumers."""
        return np.array([float(self.x), float(self.y), float(self.z)])

    def to_strings(self) -> tuple[str, str, str]:
        return (str(self.x), str(self.y), str(self.z))


def norm(v: Vector3) -> Real:
    """Euclidean length sqrt(x² + y² + z²)."""
    return (v.x * v.x + v.y * v.y + v.z * v.z).sqrt()


def normalize(v: Vector3) -> Vector3:
    """Unit vector in the direction of ``v``.

    Raises:
        DegenerateVectorError: If ``v`` has zero length.
    """
    n = norm(v)
    if n.is_zero():
        raise DegenerateVectorError(f"Cannot normalize zero vector {v}")
    return Vector3(v.x / n, v.y / n, v.z / n)


def dot(u: Vector3, v: Vector3) -> Real:
    return u.x * v.x + u.y * v.y + u.z * v.z


def cross(u: Vector3, v: Vector3) -> Vector3:
    return Vector3(
        u.y * v.z - u.z * v.y,
        u.z * v.x - u.x * v.z,
        u.x * v.y - u.y * v.x,
    )


def add(u: Vector3, v: Vector3) -> Vector3:
    return Vector3(u.x + v.x, u.y + v.y, u.z + v.z)


def sub(u: Vector3, v: Vector3) -> Vector3:
    return Vector3(u.x - v.x, u.y - v.y, u.z - v.z)


def negate(v: Vector3) -> Vector3:
    return Vector3(-v.x, -v.y, -v.z)


def scale(v: Vector3, k: ScalarLike) -> Vector3:
    """Multiply every component by ``k`` parsed at ``v``'s precision."""
    c = to_real(k, v.precision)
    return Vector3(v.x * c, v.y * c, v.z * c)


def divide(v: Vector3, k: ScalarLike) -> Vector3:
    """Divide every component by ``k`` parsed at ``v``'s precision.

    Raises:
        DivideByZeroError: If ``k`` is zero.
    """
    c = to_real(k, v.precision)
    if c.is_zero():
        raise DivideByZeroError(f"Cannot divide {v} by zero")
    return Vector3(v.x / c, v.y / c, v.z / c)


def centroid(vertices: Sequence[Vector3]) -> Vector3:
    """Mean of all ``vertices``."""
    if not vertices:
        raise MalformedShapeError("Centroid of an empty vertex list")
    total = vertices[0]
    for vertex in vertices[1:]:
        total = add(total, vertex)
    return divide(total, len(vertices))


def face_normal(vertices: Sequence[Vector3], orient_outward: bool = True) -> Vector3:
    """Unit normal of a planar face from its first three vertices.

    Vertex winding is not assumed. With ``orient_outward`` the normal is
    flipped when its dot product with the face centroid is negative, which
    for a convex shape around the origin makes it point out of the shape.

    Args:
        vertices: Face vertices, at least three, all on one plane
        orient_outward: Force the normal away from the origin

    Returns:
        Unit normal vector

    Raises:
        MalformedShapeError: If fewer than three vertices are given
        DegenerateVectorError: If the first three vertices are collinear
    """
    if len(vertices) < 3:
        raise MalformedShapeError(f"A face needs at least 3 vertices, got {len(vertices)}")
    v0, v1, v2 = vertices[0], vertices[1], vertices[2]
    n = normalize(cross(sub(v1, v0), sub(v2, v0)))
    if orient_outward and dot(n, centroid(vertices)).sign() < 0:
        n = negate(n)
    return n
