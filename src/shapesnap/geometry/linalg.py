"""
Small closed-form numeric routines for the estimators.

A 2x2 symmetric eigen-solution for principal axes and a pivoting 3x3 solve
for the circle and quadratic normal equations. Both return None instead of
non-finite values.
"""

import math

import numpy as np

# Pivots below this magnitude mean the system is singular
SINGULAR_EPS = 1e-9


def principal_axis(sxx, sxy, syy):
    """
    Unit eigenvector for the larger eigenvalue of [[sxx, sxy], [sxy, syy]].

    Returns (vx, vy). Isotropic or all-zero scatter has no preferred
    direction and gives the x axis.
    """
    trace = sxx + syy
    det = sxx * syy - sxy * sxy
    lambda1 = trace / 2 + math.sqrt(max(0.0, trace * trace / 4 - det))

    # Two algebraically equivalent forms; take the better conditioned one
    vx, vy = sxy, lambda1 - sxx
    ux, uy = lambda1 - syy, sxy
    if math.hypot(ux, uy) > math.hypot(vx, vy):
        vx, vy = ux, uy

    norm = math.hypot(vx, vy)
    if norm < 1e-6 or not math.isfinite(norm):
        return 1.0, 0.0
    return vx / norm, vy / norm


def solve_3x3(m, v):
    """
    Solve m @ x = v by Gauss-Jordan elimination with partial pivoting.

    Returns the solution as a length-3 array, or None when the system is
    singular or the result is not finite.
    """
    aug = np.column_stack([np.array(m, dtype=float), np.array(v, dtype=float)])
    if aug.shape != (3, 4) or not np.all(np.isfinite(aug)):
        return None

    for col in range(3):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot_row, col]) < SINGULAR_EPS:
            return None
        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]

        aug[col] = aug[col] / aug[col, col]
        for r in range(3):
            if r != col:
                aug[r] = aug[r] - aug[r, col] * aug[col]

    solution = aug[:, 3].copy()
    if not np.all(np.isfinite(solution)):
        return None
    return solution
