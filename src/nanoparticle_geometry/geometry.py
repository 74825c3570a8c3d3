"""
Face Table Geometry.

Derives the faces of a convex polyhedron from a vertex cloud (convex hull)
or from a set of half-spaces (half-space intersection). Works on float64
copies of the coordinates; callers map the resulting vertex indices back to
their arbitrary-precision vertices.
"""

import logging

import numpy as np
from scipy.optimize import linprog
from scipy.spatial import ConvexHull, HalfspaceIntersection, QhullError, cKDTree

from .errors import MalformedShapeError

logger = logging.getLogger(__name__)


def _find_interior_point(
    normals: np.ndarray,
    distances: np.ndarray
) -> np.ndarray | None:
    """Chebyshev center of the face planes, found with a linear program.

    Returns:
        Center of the largest inscribed ball, or None when the planes
        enclose no volume
    """
    n_constraints = len(normals)

    # Maximize r subject to: n_i . x + r <= d_i
    # Variables: [x, y, z, r]
    c = np.array([0.0, 0.0, 0.0, -1.0])
    A_ub = np.hstack([normals, np.ones((n_constraints, 1))])
    b_ub = distances

    bound = float(np.max(np.abs(distances))) * 10.0 + 1.0
    bounds = [(-bound, bound), (-bound, bound), (-bound, bound), (1e-10, None)]

    result = linprog(c, A_ub=A_ub, b_ub=b_ub, bounds=bounds, method='highs')
    if result.success and result.x[3] > 1e-10:
        return result.x[:3]
    return None


def deduplicate_vertices(
    vertices: np.ndarray,
    tolerance: float = 1e-8
) -> np.ndarray:
    """Collapse corners closer than ``tolerance`` into the first one seen."""
    if len(vertices) == 0:
        return vertices

    tree = cKDTree(vertices)
    unique_indices = []
    visited = set()

    for i in range(len(vertices)):
        if i in visited:
            continue
        neighbors = tree.query_ball_point(vertices[i], tolerance)
        visited.update(neighbors)
        unique_indices.append(i)

    return vertices[unique_indices]


def halfspace_intersection_3d(
    normals: list[np.ndarray],
    distances: list[float],
    interior_point: np.ndarray | None = None
) -> np.ndarray:
    """Corners of the solid bounded by the planes ``normal . x <= distance``.

    Args:
        normals: Outward unit normals, one per face plane
        distances: Plane offsets from the origin
        interior_point: Optional point strictly inside every plane

    Returns:
        Nx3 array of distinct corners

    Raises:
        MalformedShapeError: If the intersection is empty or unbounded
    """
    normals_arr = np.asarray(normals, dtype=float)
    distances_arr = np.asarray(distances, dtype=float)

    if len(normals_arr) < 4:
        raise MalformedShapeError(
            f"A bounded polyhedron needs at least 4 half-spaces, got {len(normals_arr)}"
        )

    if interior_point is None:
        interior_point = _find_interior_point(normals_arr, distances_arr)
        if interior_point is None:
            raise MalformedShapeError("Half-spaces have no common interior")

    # Format: [A | -b] where Ax <= b becomes Ax - b <= 0
    halfspaces = np.hstack([normals_arr, -distances_arr.reshape(-1, 1)])

    try:
        hs = HalfspaceIntersection(halfspaces, interior_point)
    except QhullError as exc:
        raise MalformedShapeError(f"Half-space intersection failed: {exc}") from exc

    vertices = hs.intersections
    if not np.all(np.isfinite(vertices)):
        raise MalformedShapeError("Half-space intersection is unbounded")
    return deduplicate_vertices(vertices)


def order_face_vertices(
    vertices: np.ndarray,
    on_face: list[int],
    normal: np.ndarray,
    tolerance: float = 1e-9
) -> list[int]:
    """Order the vertices of one face counter-clockwise seen from outside.

    Args:
        vertices: All vertices
        on_face: Indices of the vertices lying on the face plane
        normal: Outward face normal

    Returns:
        ``on_face`` sorted by angle around the face center
    """
    center = np.mean(vertices[on_face], axis=0)

    # Local coordinate system on the face
    u = vertices[on_face[0]] - center
    u = u - np.dot(u, normal) * normal
    if np.linalg.norm(u) < tolerance:
        u = vertices[on_face[1]] - center
        u = u - np.dot(u, normal) * normal
    u = u / np.linalg.norm(u)
    v = np.cross(normal, u)

    angles = []
    for idx in on_face:
        vec = vertices[idx] - center
        angles.append((np.arctan2(np.dot(vec, v), np.dot(vec, u)), idx))

    angles.sort()
    return [idx for _, idx in angles]


def hull_faces(
    vertices: np.ndarray,
    tolerance: float = 1e-8
) -> list[tuple[np.ndarray, list[int]]]:
    """Find the planar faces of the convex hull of a vertex cloud.

    Qhull triangulates faces with more than three vertices; coplanar facets
    are merged back into one polygon here.

    Args:
        vertices: Nx3 array of points
        tolerance: Plane-membership tolerance relative to the hull size

    Returns:
        List of (outward unit normal, ordered vertex indices) per face

    Raises:
        MalformedShapeError: If the points do not span a 3D volume
    """
    points = np.asarray(vertices, dtype=float)
    try:
        hull = ConvexHull(points)
    except QhullError as exc:
        raise MalformedShapeError(f"Vertices do not span a polyhedron: {exc}") from exc

    size = float(np.max(np.linalg.norm(points - points.mean(axis=0), axis=1)))
    tol = tolerance * max(size, 1.0)

    # Each row is [nx, ny, nz, offset]; equal planes give equal rows
    equations = hull.equations.copy()
    equations[:, 3] /= max(size, 1.0)
    planes = deduplicate_vertices(equations, tolerance=1e-6)

    extreme = [int(i) for i in hull.vertices]
    faces = []
    for plane in planes:
        normal = plane[:3] / np.linalg.norm(plane[:3])
        offset = plane[3] * max(size, 1.0)
        on_face = [i for i in extreme if abs(np.dot(normal, points[i]) + offset) < tol]
        if len(on_face) < 3:
            continue
        faces.append((normal, order_face_vertices(points, on_face, normal)))

    logger.debug("Hull of %d points has %d faces", len(points), len(faces))
    return faces
