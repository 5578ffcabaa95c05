"""
Stroke point simplification.

Drops pointer samples that sit closer than a minimum spacing to the previous
kept sample, which removes jitter before fitting.
"""

import numpy as np

from shapesnap.geometry.measure import as_point_array
from shapesnap.tracer import get_tracer


def simplification_distance(stroke_width, floor=1.5, width_factor=0.5):
    """Minimum spacing between kept samples for a stroke of the given width."""
    return max(floor, stroke_width * width_factor)


def simplify_stroke_points(points, min_dist):
    """
    Walk the stroke once, keeping samples at least min_dist from the last kept one.

    The first sample is always kept and the final sample is appended when the
    walk dropped it. Never fails: empty input gives an empty array and a
    single sample gives a single-point result.

    Args:
        points: stroke samples in any form accepted by as_point_array
        min_dist: minimum distance between consecutive kept samples

    Returns:
        (M, 2) array of kept samples, M <= N
    """
    pts = as_point_array(points)
    if len(pts) == 0:
        return pts

    keep = [0]
    last = pts[0]
    for i in range(1, len(pts)):
        p = pts[i]
        if np.hypot(p[0] - last[0], p[1] - last[1]) >= min_dist:
            keep.append(i)
            last = p

    if keep[-1] != len(pts) - 1:
        keep.append(len(pts) - 1)

    simplified = pts[keep]
    get_tracer().event(
        f"Simplified stroke: {len(pts)} -> {len(simplified)} points", level="DEBUG",
    )
    return simplified


def downsample_points(points, max_points):
    """Pick at most max_points evenly spaced samples, keeping both ends."""
    pts = as_point_array(points)
    n = len(pts)
    if n <= max_points:
        return pts
    if max_points < 2:
        return pts[:max_points]

    idx = np.floor(np.arange(max_points) / (max_points - 1) * (n - 1)).astype(int)
    return pts[idx]
