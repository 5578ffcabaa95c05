"""
Line estimator.

Random-sample consensus over point pairs finds the dominant line, a
principal-axis fit over its inliers refines it, and the fit is scored
against every point of the stroke.
"""

import math

import numpy as np

from shapesnap.detect.base import accept, all_finite, falloff, ramp, reject
from shapesnap.geometry.linalg import principal_axis
from shapesnap.geometry.measure import line_distances, path_length
from shapesnap.models import LineParams, Point, RejectReason, ShapeKind

MIN_SCORE = 0.55


def detect_line(points, diag, stroke_width, params, rng):
    """
    Fit and score a line hypothesis.

    Args:
        points: (N, 2) simplified stroke samples
        diag: stroke bounding diagonal
        stroke_width: pen width, sizes the inlier band
        params: SensitivityParams
        rng: numpy Generator used for pair sampling

    Returns:
        Detection for ShapeKind.LINE
    """
    n = len(points)
    if n < 2:
        return reject(ShapeKind.LINE, RejectReason.TOO_FEW_POINTS)

    eps = max(stroke_width * 1.5, diag * params.line_eps_norm, 2.5)
    best_mask, best_count = _sample_consensus(points, diag, eps, rng)

    inlier_ratio = best_count / n
    if best_mask is None or best_count < max(10, n * params.line_inlier_min):
        return reject(ShapeKind.LINE, RejectReason.INLIERS, inlier_ratio=inlier_ratio)

    fit = fit_line_principal_axis(points[best_mask])
    if fit is None:
        return reject(ShapeKind.LINE, RejectReason.FIT_FAILED, inlier_ratio=inlier_ratio)
    p1, p2 = fit

    chord = math.hypot(p2[0] - p1[0], p2[1] - p1[1])
    straightness = min(1.0, chord / max(1e-6, path_length(points)))

    # Quality is judged on every sample, not just the inliers
    d = line_distances(points, p1, p2)
    rmse_norm = float(np.sqrt(np.mean(d * d))) / diag
    max_norm = float(d.max()) / diag

    score = (
        falloff(rmse_norm, params.line_rmse_tol)
        * falloff(max_norm, params.line_max_tol)
        * ramp(straightness, params.line_straight_min)
        * ramp(inlier_ratio, params.line_inlier_min)
    )
    metrics = dict(
        rmse_norm=rmse_norm,
        max_norm=max_norm,
        straightness=straightness,
        inlier_ratio=inlier_ratio,
    )

    if not all_finite(score, rmse_norm, max_norm):
        return reject(ShapeKind.LINE, RejectReason.FIT_FAILED, **metrics)

    line = LineParams(
        p1=Point(x=float(p1[0]), y=float(p1[1])),
        p2=Point(x=float(p2[0]), y=float(p2[1])),
    )
    if score < MIN_SCORE:
        return reject(ShapeKind.LINE, RejectReason.SCORE, score=score, params=line, **metrics)
    return accept(ShapeKind.LINE, score, line, **metrics)


def _sample_consensus(points, diag, eps, rng):
    """Return (inlier mask, inlier count) of the best line through a sampled pair."""
    n = len(points)
    iterations = min(96, max(32, n * 2))
    min_pair_dist = diag * 0.1

    best_mask = None
    best_count = 0
    for _ in range(iterations):
        i = int(rng.integers(n))
        j = int(rng.integers(n))
        if j == i:
            j = (j + 1) % n

        a = points[i]
        b = points[j]
        # Near-identical samples give an unstable direction
        if math.hypot(b[0] - a[0], b[1] - a[1]) < min_pair_dist:
            continue

        mask = line_distances(points, a, b) <= eps
        count = int(np.count_nonzero(mask))
        if count > best_count:
            best_count = count
            best_mask = mask

    return best_mask, best_count


def fit_line_principal_axis(points):
    """
    Fit a segment along the principal axis of the points.

    Returns (p1, p2) at the extreme projections onto the axis, or None for
    fewer than two points.
    """
    if len(points) < 2:
        return None

    mean = points.mean(axis=0)
    centered = points - mean
    sxx = float(np.dot(centered[:, 0], centered[:, 0]))
    sxy = float(np.dot(centered[:, 0], centered[:, 1]))
    syy = float(np.dot(centered[:, 1], centered[:, 1]))

    vx, vy = principal_axis(sxx, sxy, syy)
    t = centered[:, 0] * vx + centered[:, 1] * vy
    t_min = float(t.min())
    t_max = float(t.max())

    p1 = np.array([mean[0] + vx * t_min, mean[1] + vy * t_min])
    p2 = np.array([mean[0] + vx * t_max, mean[1] + vy * t_max])
    if not (np.all(np.isfinite(p1)) and np.all(np.isfinite(p2))):
        return None
    return p1, p2
