"""
Test suite for face table geometry.

Tests hull and half-space face derivation and the shape library.
"""

import numpy as np
import pytest

from nanoparticle_geometry import (
    ConvexShape,
    MalformedShapeError,
    Real,
    Sphere,
    Vector3,
    dot,
    get_shape,
    halfspace_intersection_3d,
    hull_faces,
    list_shapes,
    norm,
)
from nanoparticle_geometry.geometry import deduplicate_vertices


# =============================================================================
# Hull Tests
# =============================================================================

class TestHullFaces:
    """Test convex hull face extraction."""

    def cube_points(self):
        return np.array([[x, y, z] for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)], dtype=float)

    def test_cube_faces_merged(self):
        """Qhull triangles are merged back into square faces."""
        faces = hull_faces(self.cube_points())
        assert len(faces) == 6
        assert all(len(indices) == 4 for _, indices in faces)

    def test_face_vertices_ordered(self):
        """Consecutive face vertices share an edge of the cube."""
        points = self.cube_points()
        for _, indices in hull_faces(points):
            for a, b in zip(indices, indices[1:] + indices[:1]):
                assert np.sum(points[a] != points[b]) == 1

    def test_counter_clockwise_from_outside(self):
        points = self.cube_points()
        for normal, indices in hull_faces(points):
            v0, v1, v2 = points[indices[:3]]
            assert np.dot(np.cross(v1 - v0, v2 - v0), normal) > 0

    def test_normals_outward(self):
        for normal, indices in hull_faces(self.cube_points()):
            assert np.linalg.norm(normal) == pytest.approx(1.0)
            assert np.dot(normal, self.cube_points()[indices[0]]) > 0

    def test_interior_points_ignored(self):
        points = np.vstack([self.cube_points(), [[0, 0, 0], [0.5, 0.2, -0.1]]])
        faces = hull_faces(points)
        used = {i for _, indices in faces for i in indices}
        assert used == set(range(8))

    def test_flat_points(self):
        flat = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=float)
        with pytest.raises(MalformedShapeError):
            hull_faces(flat)


# =============================================================================
# Half-space Tests
# =============================================================================

class TestHalfspaceIntersection:
    """Test half-space intersection."""

    def test_cube(self):
        normals = [np.array(n, dtype=float) for n in
                   ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1))]
        vertices = halfspace_intersection_3d(normals, [1.0] * 6)
        assert len(vertices) == 8
        assert np.allclose(np.abs(vertices), 1.0)

    def test_truncated_octahedron(self):
        """Octahedron {111} truncated by cube {100} gives 14 faces."""
        octa = [np.array([x, y, z]) / np.sqrt(3) for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)]
        cube = [np.array(n, dtype=float) for n in
                ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1))]
        shape = ConvexShape.from_halfspaces(
            "truncated octahedron", octa + cube, [1.0] * 8 + [1.3] * 6, precision=15
        )
        assert len(shape.faces) == 14
        assert shape.euler_characteristic() == 2
        assert shape.is_valid()

    def test_empty_intersection(self):
        normals = [np.array(n, dtype=float) for n in
                   ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1))]
        with pytest.raises(MalformedShapeError):
            halfspace_intersection_3d(normals, [-1.0, -1.0, 1.0, 1.0, 1.0, 1.0])

    def test_too_few_halfspaces(self):
        normals = [np.array([1.0, 0, 0]), np.array([-1.0, 0, 0])]
        with pytest.raises(MalformedShapeError):
            halfspace_intersection_3d(normals, [1.0, 1.0])

    def test_deduplicate_vertices(self):
        vertices = np.array([[0, 0, 0], [1e-12, 0, 0], [1, 0, 0]], dtype=float)
        assert len(deduplicate_vertices(vertices)) == 2


# =============================================================================
# Shape Library Tests
# =============================================================================

SHAPE_COUNTS = {
    "tetrahedron": (4, 4),
    "cube": (8, 6),
    "octahedron": (6, 8),
    "dodecahedron": (20, 12),
    "icosahedron": (12, 20),
    "cuboctahedron": (12, 14),
    "truncated_tetrahedron": (12, 8),
    "truncated_octahedron": (24, 14),
    "rhombic_dodecahedron": (14, 12),
    "icosidodecahedron": (30, 32),
}


class TestShapeLibrary:
    """Test the named polyhedra."""

    @pytest.mark.parametrize("name,counts", SHAPE_COUNTS.items())
    def test_vertex_and_face_counts(self, name, counts):
        shape = get_shape(name, 10, precision=20)
        assert (len(shape.vertices()), len(shape.faces)) == counts

    @pytest.mark.parametrize("name", SHAPE_COUNTS)
    def test_valid_polyhedron(self, name):
        shape = get_shape(name, 10, precision=20)
        assert shape.euler_characteristic() == 2
        assert shape.is_valid()

    @pytest.mark.parametrize("name", SHAPE_COUNTS)
    def test_circumradius(self, name):
        shape = get_shape(name, "7.5", precision=20)
        radii = [float(norm(v)) for v in shape.vertices()]
        assert max(radii) == pytest.approx(7.5, abs=1e-12)

    @pytest.mark.parametrize("name", SHAPE_COUNTS)
    def test_normals_unit_and_outward(self, name):
        shape = get_shape(name, 5, precision=20)
        for face in shape.faces:
            assert float(norm(face.normal)) == pytest.approx(1.0, abs=1e-15)
            assert dot(face.normal, face.reference_vertex) > 0

    @pytest.mark.parametrize("name", SHAPE_COUNTS)
    def test_origin_inside(self, name):
        shape = get_shape(name, 5, precision=20)
        assert shape.contains(Vector3.zero(20))

    def test_sphere(self):
        shape = get_shape("sphere", 4, precision=10)
        assert isinstance(shape, Sphere)
        assert shape.radius == Real(4, 10)

    def test_name_normalized(self):
        shape = get_shape("Truncated-Octahedron", 4, precision=10)
        assert shape.name == "truncated_octahedron"

    def test_unknown_shape(self):
        with pytest.raises(KeyError, match="known shapes"):
            get_shape("klein_bottle", 4)

    def test_non_positive_radius(self):
        with pytest.raises(ValueError):
            get_shape("cube", 0)

    def test_list_shapes(self):
        names = list_shapes()
        assert "sphere" in names
        assert set(SHAPE_COUNTS) <= set(names)
        assert names == sorted(names)
