"""
Circle estimator.

Three-point random-sample consensus proposes a circle, an algebraic (Kasa)
least-squares fit refines it, and the result is gated on aspect ratio,
closedness, inlier ratio and angular coverage before being scored on radial
error.
"""

import math

import numpy as np

from shapesnap.detect.base import accept, all_finite, clamp01, falloff, ramp, reject
from shapesnap.geometry.linalg import solve_3x3
from shapesnap.geometry.measure import closedness as stroke_closedness
from shapesnap.geometry.measure import compute_bounds
from shapesnap.models import CircleParams, RejectReason, ShapeKind

MIN_POINTS = 6
MIN_RADIUS = 6.0
MIN_SCORE = 0.45
TWO_PI = 2 * math.pi

# Sensitivity above which open arcs are entertained at all
OPEN_ARC_SENSITIVITY = 0.65
# Sensitivity above which a poor inlier ratio is tolerated
LOW_INLIER_SENSITIVITY = 0.70
# Sensitivity above which closedness matters less and clean arcs can win
ARC_FRIENDLY_SENSITIVITY = 0.80


def detect_circle(points, diag, stroke_width, params, rng):
    """
    Fit and score a circle hypothesis.

    Args:
        points: (N, 2) simplified stroke samples
        diag: stroke bounding diagonal
        stroke_width: pen width, sizes the inlier band
        params: SensitivityParams
        rng: numpy Generator used for triple sampling

    Returns:
        Detection for ShapeKind.CIRCLE
    """
    n = len(points)
    if n < MIN_POINTS:
        return reject(ShapeKind.CIRCLE, RejectReason.TOO_FEW_POINTS)

    bounds = compute_bounds(points)
    aspect = bounds.width / max(1e-6, bounds.height)
    aspect_min = params.circle_aspect_min
    if aspect < aspect_min or aspect > 1 / max(1e-6, aspect_min):
        return reject(ShapeKind.CIRCLE, RejectReason.ASPECT, aspect=aspect)

    closed = stroke_closedness(points, diag)
    too_open = closed > params.circle_closed_max
    if too_open and params.s < OPEN_ARC_SENSITIVITY:
        return reject(ShapeKind.CIRCLE, RejectReason.CLOSEDNESS, closedness=closed)

    eps = max(stroke_width * 1.8, diag * params.circle_eps_norm, 3.5)
    best_mask, best_count = _sample_consensus(points, diag, eps, rng)

    used_fallback = False
    if best_mask is not None and best_count >= max(14, n * params.circle_inlier_min):
        inlier_ratio = best_count / n
        refined = fit_circle_kasa(points[best_mask])
    else:
        used_fallback = True
        refined = fit_circle_kasa(points)
        inlier_ratio = 0.0
        if refined is not None:
            inlier_ratio = float(np.count_nonzero(radial_errors(points, *refined) <= eps)) / n

    if refined is None:
        return reject(ShapeKind.CIRCLE, RejectReason.FIT_FAILED, used_fallback=used_fallback)
    cx, cy, r = refined
    circle = CircleParams(cx=cx, cy=cy, r=r)

    if inlier_ratio < params.circle_inlier_min and params.s < LOW_INLIER_SENSITIVITY:
        return reject(
            ShapeKind.CIRCLE, RejectReason.INLIERS, params=circle,
            inlier_ratio=inlier_ratio, used_fallback=used_fallback,
        )

    coverage = angle_coverage(points, cx, cy)
    if coverage < params.circle_coverage_min:
        return reject(
            ShapeKind.CIRCLE, RejectReason.COVERAGE, params=circle,
            coverage=coverage, inlier_ratio=inlier_ratio, closedness=closed,
            used_fallback=used_fallback,
        )

    mean_abs, std = radial_error_stats(points, cx, cy, r)
    radial_std_norm = std / max(1e-6, r)
    mean_abs_norm = mean_abs / max(1e-6, r)

    radial_std_score = falloff(radial_std_norm, params.circle_radial_std_tol)
    mean_abs_score = falloff(mean_abs_norm, params.circle_mean_abs_tol)
    closed_score = falloff(closed, params.circle_closed_max * (2.6 if too_open else 1.0))
    coverage_score = ramp(coverage, params.circle_coverage_min, TWO_PI)
    inlier_score = clamp01(inlier_ratio / max(1e-6, params.circle_inlier_min))

    arc_friendly = params.s >= ARC_FRIENDLY_SENSITIVITY
    w_closed = 0.06 if arc_friendly else 0.14
    # May exceed 1; the raw value ranks shapes and candidates clamp it
    score = (
        0.34 * radial_std_score
        + 0.24 * mean_abs_score
        + 0.22 * coverage_score
        + 0.14 * inlier_score
        + w_closed * closed_score
    )
    # A clean open arc can still win at high sensitivity
    if (arc_friendly
            and radial_std_norm < params.circle_radial_std_tol * 0.55
            and mean_abs_norm < params.circle_mean_abs_tol * 0.55):
        score = max(score, 0.72)

    metrics = dict(
        radial_std_norm=radial_std_norm,
        mean_abs_norm=mean_abs_norm,
        closedness=closed,
        coverage=coverage,
        inlier_ratio=inlier_ratio,
        radial_std_score=radial_std_score,
        mean_abs_score=mean_abs_score,
        coverage_score=coverage_score,
        inlier_score=inlier_score,
        closed_score=closed_score,
        used_fallback=used_fallback,
    )

    if not all_finite(score, radial_std_norm, mean_abs_norm):
        return reject(ShapeKind.CIRCLE, RejectReason.FIT_FAILED, **metrics)
    if too_open and not arc_friendly:
        return reject(ShapeKind.CIRCLE, RejectReason.CLOSEDNESS, score=score, params=circle, **metrics)
    if score < MIN_SCORE:
        return reject(ShapeKind.CIRCLE, RejectReason.SCORE, score=score, params=circle, **metrics)
    return accept(ShapeKind.CIRCLE, score, circle, **metrics)


def _sample_consensus(points, diag, eps, rng):
    """Return (inlier mask, inlier count) of the best circle through a sampled triple."""
    n = len(points)
    iterations = min(140, max(50, n * 3))
    max_radius = diag * 2

    best_mask = None
    best_count = 0
    for _ in range(iterations):
        i = int(rng.integers(n))
        j = int(rng.integers(n))
        k = int(rng.integers(n))
        if j == i:
            j = (j + 1) % n
        if k == i or k == j:
            k = (k + 2) % n

        circle = circle_from_three(points[i], points[j], points[k])
        if circle is None:
            continue
        cx, cy, r = circle
        if r < MIN_RADIUS or r > max_radius:
            continue

        mask = radial_errors(points, cx, cy, r) <= eps
        count = int(np.count_nonzero(mask))
        if count > best_count:
            best_count = count
            best_mask = mask

    return best_mask, best_count


def circle_from_three(p1, p2, p3):
    """
    Circle through three points as (cx, cy, r).

    Returns None for coincident or near-collinear points.
    """
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])
    x3, y3 = float(p3[0]), float(p3[1])

    a = x1 - x2
    b = y1 - y2
    c = x1 - x3
    d = y1 - y3
    e = ((x1 * x1 - x2 * x2) + (y1 * y1 - y2 * y2)) / 2
    f = ((x1 * x1 - x3 * x3) + (y1 * y1 - y3 * y3)) / 2
    det = a * d - b * c
    if abs(det) < 1e-6:
        return None

    cx = (d * e - b * f) / det
    cy = (-c * e + a * f) / det
    r = math.hypot(x1 - cx, y1 - cy)
    if not all_finite(cx, cy, r):
        return None
    return cx, cy, r


def fit_circle_kasa(points):
    """
    Algebraic least-squares circle fit (Kasa method).

    Solves x^2 + y^2 = A*x + B*y + C in the least-squares sense; the circle
    has center (A/2, B/2) and radius sqrt(A^2/4 + B^2/4 + C). Returns
    (cx, cy, r) or None when the system is singular or the radius is not real.
    """
    if len(points) < 3:
        return None

    x = points[:, 0]
    y = points[:, 1]
    z = x * x + y * y
    m = [
        [np.dot(x, x), np.dot(x, y), x.sum()],
        [np.dot(x, y), np.dot(y, y), y.sum()],
        [x.sum(), y.sum(), float(len(points))],
    ]
    v = [np.dot(x, z), np.dot(y, z), z.sum()]

    solution = solve_3x3(m, v)
    if solution is None:
        return None

    a, b, c = (float(s) for s in solution)
    cx = a / 2
    cy = b / 2
    r2 = (a * a + b * b) / 4 + c
    if r2 <= 0:
        return None
    r = math.sqrt(r2)
    if not all_finite(cx, cy, r):
        return None
    return cx, cy, r


def radial_errors(points, cx, cy, r):
    """Absolute distance of each point from the circle."""
    return np.abs(np.hypot(points[:, 0] - cx, points[:, 1] - cy) - r)


def radial_error_stats(points, cx, cy, r):
    """Mean absolute radial error and standard deviation of the signed error."""
    err = np.hypot(points[:, 0] - cx, points[:, 1] - cy) - r
    mean = float(err.mean())
    variance = max(0.0, float(np.mean(err * err)) - mean * mean)
    return float(np.abs(err).mean()), math.sqrt(variance)


def angle_coverage(points, cx, cy):
    """
    Angular span swept by the points around (cx, cy), in radians.

    2*pi minus the largest gap between consecutive sorted angles, so a
    shallow arc scores low however densely it is sampled.
    """
    if len(points) < 3:
        return 0.0

    angles = np.sort(np.arctan2(points[:, 1] - cy, points[:, 0] - cx))
    max_gap = float(np.max(np.diff(angles))) if len(angles) > 1 else 0.0
    max_gap = max(max_gap, float(angles[0] + TWO_PI - angles[-1]))
    return TWO_PI - max_gap
