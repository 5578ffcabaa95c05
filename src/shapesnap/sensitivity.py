"""
Sensitivity model.

Maps the single 0-100 sensitivity knob to the full set of acceptance floors
and fit tolerances. Every field is a linear interpolation between a strict
bound (sensitivity 0) and a loose bound (sensitivity 100).
"""

import math
import re
from dataclasses import dataclass, fields

from shapesnap.models import ShapeKind

# field -> (strict, loose)
SENSITIVITY_BOUNDS = {
    "accept_score": (0.96, 0.62),
    "accept_line": (0.96, 0.70),
    "accept_circle": (0.96, 0.45),
    "accept_parabola": (0.96, 0.42),
    "line_rmse_tol": (0.018, 0.070),
    "line_max_tol": (0.045, 0.120),
    "line_straight_min": (0.90, 0.65),
    "line_inlier_min": (0.82, 0.60),
    "line_eps_norm": (0.010, 0.020),
    "circle_closed_max": (0.12, 0.50),
    "circle_radial_std_tol": (0.08, 0.22),
    "circle_mean_abs_tol": (0.05, 0.12),
    "circle_coverage_min": (5.6, 2.8),
    "circle_aspect_min": (0.85, 0.25),
    "circle_inlier_min": (0.82, 0.45),
    "circle_eps_norm": (0.012, 0.024),
    "parabola_rmse_tol": (0.020, 0.180),
    "parabola_inlier_frac": (0.85, 0.50),
    "parabola_curv_min": (0.20, 0.02),
    "parabola_closed_max": (0.10, 0.35),
}

# Leading integer of a string setting, as read by an integer parse
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class SensitivityParams:
    """Tolerances and acceptance floors for one recognition call."""
    s: float
    accept_score: float
    accept_line: float
    accept_circle: float
    accept_parabola: float
    line_rmse_tol: float
    line_max_tol: float
    line_straight_min: float
    line_inlier_min: float
    line_eps_norm: float
    circle_closed_max: float
    circle_radial_std_tol: float
    circle_mean_abs_tol: float
    circle_coverage_min: float  # radians
    circle_aspect_min: float
    circle_inlier_min: float
    circle_eps_norm: float
    parabola_rmse_tol: float
    parabola_inlier_frac: float
    parabola_curv_min: float
    parabola_closed_max: float

    @property
    def sensitivity(self):
        return int(round(self.s * 100))

    def accept_threshold(self, kind):
        """Per-shape acceptance floor."""
        if kind == ShapeKind.LINE:
            return self.accept_line
        if kind == ShapeKind.CIRCLE:
            return self.accept_circle
        if kind == ShapeKind.PARABOLA:
            return self.accept_parabola
        return self.accept_score

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


def clamp_sensitivity(value, low=0, high=100):
    """
    Coerce a sensitivity setting to an integer in [low, high].

    Strings are read up to the end of their leading integer ("50abc" and
    "49.9" both read as their integer part). Numbers truncate. Anything else,
    including non-finite numbers, gives the strictest setting.
    """
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return low
        number = int(match.group(1))
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return low
        if not math.isfinite(number):
            return low
        number = int(number)
    return max(low, min(high, number))


def derive_params(sensitivity):
    """Build SensitivityParams for a 0-100 sensitivity setting."""
    s = clamp_sensitivity(sensitivity) / 100.0
    values = {
        name: strict + (loose - strict) * s
        for name, (strict, loose) in SENSITIVITY_BOUNDS.items()
    }
    return SensitivityParams(s=s, **values)
