"""
Convex Shapes.

A convex polyhedron is stored as a face table: every face keeps its ordered
vertices and an outward unit normal. A point is inside when it lies on the
inner side of every face plane, which is all :func:`contains` checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, Sequence

import numpy as np

from .errors import DegenerateVectorError, MalformedShapeError
from .geometry import halfspace_intersection_3d, hull_faces
from .numeric import Real, ScalarLike, to_real
from .vector import Vector3, cross, dot, face_normal, negate, norm, scale, sub

logger = logging.getLogger(__name__)


class Region(Protocol):
    """Anything that answers point-containment queries."""

    name: str
    radius: Real

    def contains(self, point: Vector3) -> bool: ...


@dataclass(frozen=True)
class FaceDescriptor:
    """One planar face: its vertices and outward unit normal.

    Vertex 0 anchors the face's half-space. Side tests use ``plane_normal``,
    the unnormalized cross product of the first two edges oriented like
    ``normal``. It is exact for exact vertices, so points on the face plane
    test as exactly zero even when the unit normal is irrational.
    """

    vertices: tuple[Vector3, ...]
    normal: Vector3
    plane_normal: Vector3 = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "vertices", tuple(self.vertices))
        if len(self.vertices) < 3:
            raise MalformedShapeError(
                f"A face needs at least 3 vertices, got {len(self.vertices)}"
            )
        v0, v1, v2 = self.vertices[:3]
        plane = cross(sub(v1, v0), sub(v2, v0))
        orientation = dot(plane, self.normal).sign()
        if orientation == 0:
            raise DegenerateVectorError(
                f"Face plane through {v0}, {v1}, {v2} is degenerate or normal to {self.normal}"
            )
        object.__setattr__(self, "plane_normal", plane if orientation > 0 else negate(plane))

    @classmethod
    def from_vertices(
        cls,
        vertices: Sequence[Vector3],
        orient_outward: bool = True
    ) -> FaceDescriptor:
        """Build a face, deriving its normal from the first three vertices."""
        vertices = tuple(vertices)
        return cls(vertices, face_normal(vertices, orient_outward))

    @property
    def reference_vertex(self) -> Vector3:
        return self.vertices[0]

    def __len__(self) -> int:
        return len(self.vertices)

    def side(self, point: Vector3) -> int:
        """1 outside the face plane, 0 on it, -1 inside."""
        return dot(self.plane_normal, sub(point, self.reference_vertex)).sign()

    def signed_distance(self, point: Vector3) -> Real:
        """Distance from the face plane; positive outside, exactly zero on it."""
        return dot(self.plane_normal, sub(point, self.reference_vertex)) / norm(self.plane_normal)

    def scaled(self, factor: ScalarLike) -> FaceDescriptor:
        return FaceDescriptor(tuple(scale(v, factor) for v in self.vertices), self.normal)


@dataclass(frozen=True)
class ConvexShape:
    """Convex polyhedron as an intersection of face half-spaces.

    Attributes:
        name: Shape name, used in messages only
        radius: Circumradius the face table was built for
        faces: Face table
    """

    name: str
    radius: Real
    faces: tuple[FaceDescriptor, ...]

    def __post_init__(self):
        object.__setattr__(self, "faces", tuple(self.faces))
        if not self.faces:
            raise MalformedShapeError(f"Shape {self.name!r} has no faces")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_face_vertices(
        cls,
        name: str,
        radius: ScalarLike,
        faces: Iterable[Sequence[Vector3]],
        orient_outward: bool = True
    ) -> ConvexShape:
        """Build a shape from explicit per-face vertex lists."""
        table = tuple(FaceDescriptor.from_vertices(f, orient_outward) for f in faces)
        if not table:
            raise MalformedShapeError(f"Shape {name!r} has no faces")
        return cls(name, to_real(radius, table[0].normal.precision), table)

    @classmethod
    def from_vertices(
        cls,
        name: str,
        vertices: Sequence[Vector3],
        radius: ScalarLike | None = None
    ) -> ConvexShape:
        """Build a shape from the convex hull of its vertices.

        Face membership and ordering are found on float copies; the faces
        themselves keep the given arbitrary-precision vertices.

        Args:
            name: Shape name
            vertices: Polyhedron vertices centered on the origin
            radius: Circumradius; defaults to the largest vertex norm

        Returns:
            ConvexShape
        """
        vertices = list(vertices)
        if len(vertices) < 4:
            raise MalformedShapeError(f"Shape {name!r} needs at least 4 vertices")
        points = np.array([v.to_array() for v in vertices])
        faces = [
            [vertices[i] for i in indices]
            for _, indices in hull_faces(points)
        ]
        if radius is None:
            radius = max((norm(v) for v in vertices))
        shape = cls.from_face_vertices(name, radius, faces)
        logger.debug("Built %s from %d vertices: %d faces", name, len(vertices), len(shape.faces))
        return shape

    @classmethod
    def from_halfspaces(
        cls,
        name: str,
        normals: Sequence[Sequence[float]],
        distances: Sequence[float],
        precision: int | None = None
    ) -> ConvexShape:
        """Build a shape bounded by the planes ``n . x = d``.

        Vertices are computed in float64 and then parsed at ``precision``.
        """
        points = halfspace_intersection_3d(
            [np.asarray(n, dtype=float) / np.linalg.norm(n) for n in normals],
            list(distances),
        )
        vertices = [Vector3.of(*(float(c) for c in p), precision=precision) for p in points]
        return cls.from_vertices(name, vertices)

    def scaled(self, factor: ScalarLike) -> ConvexShape:
        """Same shape with every vertex scaled by a positive ``factor``."""
        k = to_real(factor, self.radius.precision)
        if k.sign() <= 0:
            raise ValueError(f"Scale factor must be positive, got {factor}")
        return ConvexShape(self.name, self.radius * k, tuple(f.scaled(k) for f in self.faces))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains(self, point: Vector3) -> bool:
        """True when ``point`` is inside or on the boundary."""
        for face in self.faces:
            if face.side(point) > 0:
                return False
        return True

    def vertices(self) -> list[Vector3]:
        """Unique vertices in order of first appearance."""
        seen: dict[Vector3, None] = {}
        for face in self.faces:
            for v in face.vertices:
                seen.setdefault(v, None)
        return list(seen)

    def edges(self) -> list[tuple[int, int]]:
        """Edges as sorted vertex-index pairs into :meth:`vertices`."""
        index = {v: i for i, v in enumerate(self.vertices())}
        edges = set()
        for face in self.faces:
            ids = [index[v] for v in face.vertices]
            for a, b in zip(ids, ids[1:] + ids[:1]):
                edges.add((min(a, b), max(a, b)))
        return sorted(edges)

    def euler_characteristic(self) -> int:
        """V - E + F; 2 for any closed convex polyhedron."""
        return len(self.vertices()) - len(self.edges()) + len(self.faces)

    def is_valid(self, tolerance: float = 1e-9) -> bool:
        """Check that the face table describes a closed convex polyhedron.

        Every face must be planar and every vertex must lie on the inner side
        of every face plane.
        """
        if self.euler_characteristic() != 2:
            return False
        points = np.array([v.to_array() for v in self.vertices()])
        tol = tolerance * max(float(self.radius), 1.0)
        for face in self.faces:
            n = face.normal.to_array()
            anchor = face.reference_vertex.to_array()
            own = np.array([v.to_array() for v in face.vertices])
            if np.any(np.abs((own - anchor) @ n) > tol):
                return False
            if np.any((points - anchor) @ n > tol):
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        vertices = self.vertices()
        index = {v: i for i, v in enumerate(vertices)}
        return {
            'name': self.name,
            'radius': str(self.radius),
            'vertices': [list(v.to_strings()) for v in vertices],
            'faces': [[index[v] for v in f.vertices] for f in self.faces],
            'face_normals': [list(f.normal.to_strings()) for f in self.faces],
        }


@dataclass(frozen=True)
class Sphere:
    """Ball of ``radius`` around the origin."""

    name: str
    radius: Real

    def contains(self, point: Vector3) -> bool:
        return dot(point, point) <= self.radius * self.radius


def contains(shape: Region, point: Vector3) -> bool:
    """Point-containment test; boundary points count as inside."""
    return shape.contains(point)
