"""
Parabola estimator.

Fits an axis-aligned quadratic in both orientations with trimmed iterative
least squares, keeps the orientation with the lower normalized RMSE, and
scores it on residual, curvature and inlier fraction.
"""

import math
from dataclasses import dataclass

import numpy as np

from shapesnap.detect.base import accept, all_finite, clamp01, falloff, ramp, reject
from shapesnap.geometry.linalg import solve_3x3
from shapesnap.geometry.measure import closedness as stroke_closedness
from shapesnap.geometry.measure import stroke_diagonal
from shapesnap.models import Orientation, ParabolaParams, RejectReason, ShapeKind

MIN_POINTS = 10
MIN_DIAGONAL = 20.0
MIN_SCORE = 0.45
TRIM_ITERATIONS = 3
MIN_KEEP = 8
# Curvature at which the curvature score saturates
CURV_FULL = 0.7
# Score multiplier for strokes that look like closed loops
CLOSED_LOOP_PENALTY = 0.35


@dataclass
class QuadraticFit:
    """A trimmed quadratic fit in one orientation."""
    orientation: Orientation
    origin: float
    a: float
    b: float
    c: float
    t_min: float
    t_max: float
    rmse_norm: float
    max_abs: float
    inlier_ratio: float

    def to_params(self):
        return ParabolaParams(
            orientation=self.orientation, origin=self.origin,
            a=self.a, b=self.b, c=self.c, t_min=self.t_min, t_max=self.t_max,
        )


def detect_parabola(points, diag, stroke_width, params, rng=None):
    """
    Fit and score a parabola hypothesis.

    The fit is deterministic; stroke_width and rng are accepted so every
    estimator shares one call signature.

    Returns:
        Detection for ShapeKind.PARABOLA
    """
    if len(points) < MIN_POINTS:
        return reject(ShapeKind.PARABOLA, RejectReason.TOO_FEW_POINTS)

    if stroke_diagonal(points) < MIN_DIAGONAL:
        return reject(ShapeKind.PARABOLA, RejectReason.TOO_SMALL)

    closed = stroke_closedness(points, diag)
    fits = [
        fit_quadratic_trimmed(points, orientation, params.parabola_inlier_frac)
        for orientation in (Orientation.Y_OF_X, Orientation.X_OF_Y)
    ]
    fits = [f for f in fits if f is not None]
    if not fits:
        return reject(ShapeKind.PARABOLA, RejectReason.FIT_FAILED, closedness=closed)

    best = min(fits, key=lambda f: f.rmse_norm)

    domain = max(1e-6, best.t_max - best.t_min)
    curv = abs(best.a) * domain * domain / diag

    rmse_score = falloff(best.rmse_norm, params.parabola_rmse_tol)
    curv_score = ramp(curv, params.parabola_curv_min, CURV_FULL)
    inlier_score = clamp01(best.inlier_ratio / max(1e-6, params.parabola_inlier_frac))

    score = 0.55 * rmse_score + 0.25 * curv_score + 0.20 * inlier_score
    if closed < params.parabola_closed_max:
        score *= CLOSED_LOOP_PENALTY

    metrics = dict(
        rmse_norm=best.rmse_norm,
        curv=curv,
        inlier_ratio=best.inlier_ratio,
        closedness=closed,
        rmse_score=rmse_score,
        curv_score=curv_score,
        inlier_score=inlier_score,
    )

    if not all_finite(score, curv):
        return reject(ShapeKind.PARABOLA, RejectReason.FIT_FAILED, **metrics)
    parabola = best.to_params()
    if score < MIN_SCORE:
        return reject(ShapeKind.PARABOLA, RejectReason.SCORE, score=score, params=parabola, **metrics)
    return accept(ShapeKind.PARABOLA, score, parabola, **metrics)


def _split_axes(points, orientation):
    """Return (coordinate, value) columns for an orientation."""
    if orientation == Orientation.Y_OF_X:
        return points[:, 0], points[:, 1]
    return points[:, 1], points[:, 0]


def fit_quadratic_trimmed(points, orientation, keep_frac):
    """
    Trimmed iterative least-squares quadratic fit.

    Each pass fits the active set, ranks every point of the full stroke by
    absolute residual and keeps the best keep_frac of them as the next active
    set, so trimming never compounds across passes.

    Returns a QuadraticFit, or None when any normal-equation solve is
    singular.
    """
    frac = max(0.5, min(0.95, keep_frac))
    coord, value = _split_axes(points, orientation)
    origin = float(coord.mean())
    t = coord - origin

    n = len(points)
    keep_n = min(n, max(MIN_KEEP, int(math.floor(n * frac))))
    active = np.arange(n)
    coeffs = None

    for _ in range(TRIM_ITERATIONS):
        coeffs = fit_quadratic_least_squares(t[active], value[active])
        if coeffs is None:
            return None
        residuals = np.abs(value - _evaluate(coeffs, t))
        active = np.argsort(residuals, kind="stable")[:keep_n]

    err = value - _evaluate(coeffs, t)
    rmse = math.sqrt(float(np.mean(err * err)))
    rmse_norm = rmse / stroke_diagonal(points)

    a, b, c = coeffs
    return QuadraticFit(
        orientation=orientation,
        origin=origin,
        a=a, b=b, c=c,
        t_min=float(t.min()),
        t_max=float(t.max()),
        rmse_norm=rmse_norm,
        max_abs=float(np.abs(err).max()),
        inlier_ratio=len(active) / n,
    )


def fit_quadratic_least_squares(t, y):
    """
    Solve the normal equations for y = a*t^2 + b*t + c.

    Returns (a, b, c) or None for fewer than three samples or a singular
    system.
    """
    if len(t) < 3:
        return None

    t2 = t * t
    s4 = float(np.dot(t2, t2))
    s3 = float(np.dot(t2, t))
    s2 = float(t2.sum())
    s1 = float(t.sum())
    s0 = float(len(t))
    m = [[s4, s3, s2], [s3, s2, s1], [s2, s1, s0]]
    v = [float(np.dot(y, t2)), float(np.dot(y, t)), float(y.sum())]

    solution = solve_3x3(m, v)
    if solution is None:
        return None
    return tuple(float(s) for s in solution)


def _evaluate(coeffs, t):
    a, b, c = coeffs
    return a * t * t + b * t + c
