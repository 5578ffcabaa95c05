"""
Point-set measurements used by every estimator.

Bounds, path length and point-to-line/segment/polyline distances. All
functions are pure and work on (N, 2) float arrays; `as_point_array` coerces
the input forms callers hand the engine.
"""

import math

import numpy as np

from shapesnap.models import Bounds, Point

# Segments shorter than this are treated as a single point
DEGENERATE_EPS = 1e-6


def as_point_array(points):
    """
    Coerce points into an (N, 2) float array.

    Accepts Point models, mappings with "x"/"y" keys, [x, y] pairs or an
    existing array (extra columns such as pressure are dropped).
    """
    if isinstance(points, np.ndarray):
        if points.size == 0:
            return np.zeros((0, 2))
        return np.asarray(points, dtype=float).reshape(len(points), -1)[:, :2]

    coords = []
    for p in points:
        if isinstance(p, Point):
            coords.append((p.x, p.y))
        elif isinstance(p, dict):
            coords.append((p["x"], p["y"]))
        else:
            coords.append((p[0], p[1]))

    if not coords:
        return np.zeros((0, 2))
    return np.array(coords, dtype=float)


def compute_bounds(points):
    """
    Compute the axis-aligned bounding box of a non-empty point set.

    Raises ValueError on empty input.
    """
    pts = as_point_array(points)
    if len(pts) == 0:
        raise ValueError("cannot compute bounds of an empty point set")

    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return Bounds(
        min_x=float(mins[0]), min_y=float(mins[1]),
        max_x=float(maxs[0]), max_y=float(maxs[1]),
    )


def stroke_diagonal(points):
    """Bounding diagonal floored at 1, the scale every tolerance is relative to."""
    return max(1.0, compute_bounds(points).diagonal)


def path_length(points):
    """Total distance the pen travelled along the polyline."""
    pts = as_point_array(points)
    if len(pts) < 2:
        return 0.0
    diffs = np.diff(pts, axis=0)
    return float(np.sum(np.hypot(diffs[:, 0], diffs[:, 1])))


def closedness(points, diag):
    """Distance between first and last point relative to the diagonal."""
    start = points[0]
    end = points[-1]
    return float(math.hypot(end[0] - start[0], end[1] - start[1]) / diag)


def line_distances(points, a, b):
    """
    Perpendicular distances from each point to the infinite line through a, b.

    Falls back to point-to-point distance from a when a and b coincide.
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    denom = math.hypot(dx, dy)
    if denom < DEGENERATE_EPS:
        return np.hypot(points[:, 0] - a[0], points[:, 1] - a[1])
    return np.abs(dy * points[:, 0] - dx * points[:, 1] + b[0] * a[1] - b[1] * a[0]) / denom


def point_to_line_distance(p, a, b):
    """Distance from p to the infinite line through a and b."""
    pts = as_point_array([p])
    a = as_point_array([a])[0]
    b = as_point_array([b])[0]
    return float(line_distances(pts, a, b)[0])


def point_to_segment_distance(p, a, b):
    """Distance from p to the segment ab, with the projection clamped to it."""
    p, a, b = as_point_array([p, a, b])
    ab = b - a
    ap = p - a
    ab_len2 = float(np.dot(ab, ab))
    if ab_len2 < DEGENERATE_EPS:
        return float(math.hypot(ap[0], ap[1]))

    t = max(0.0, min(1.0, float(np.dot(ap, ab)) / ab_len2))
    nearest = a + t * ab
    return float(math.hypot(p[0] - nearest[0], p[1] - nearest[1]))


def point_to_polyline_distance(p, points):
    """Minimum distance from p to any segment of the polyline; inf below 2 points."""
    pts = as_point_array(points)
    if len(pts) < 2:
        return math.inf

    best = math.inf
    for i in range(1, len(pts)):
        d = point_to_segment_distance(p, pts[i - 1], pts[i])
        if d < best:
            best = d
    return best
