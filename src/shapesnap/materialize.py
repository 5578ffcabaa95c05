"""
Shape materializer.

Regenerates a dense display polyline from a recognized shape's analytic
parameters, so renderers never need to know the analytic form.
"""

import math

from shapesnap.config import MaterializeConfig
from shapesnap.models import CircleParams, LineParams, ParabolaParams, Point

MIN_PARABOLA_SAMPLES = 30


def generate_line_points(line):
    """The two refined endpoints."""
    return [line.p1, line.p2]


def generate_circle_points(cx, cy, r, count=120):
    """
    Sample count uniform angles around the circle.

    Returns count + 1 points; the last repeats the first so the polyline
    closes.
    """
    count = max(3, int(count))
    points = []
    for i in range(count + 1):
        theta = (i / count) * 2 * math.pi
        points.append(Point(x=cx + math.cos(theta) * r, y=cy + math.sin(theta) * r))
    return points


def generate_parabola_points(parabola, count=140):
    """Sample count + 1 uniform parameter values across [t_min, t_max]."""
    n = max(MIN_PARABOLA_SAMPLES, int(count or 140))
    points = []
    for i in range(n + 1):
        t = parabola.t_min + (parabola.t_max - parabola.t_min) * (i / n)
        x, y = parabola.evaluate(t)
        points.append(Point(x=x, y=y))
    return points


def materialize(params, config=None):
    """
    Render points for any recognized shape.

    Args:
        params: LineParams, CircleParams or ParabolaParams
        config: MaterializeConfig (defaults if omitted)

    Returns:
        list of Point
    """
    config = config or MaterializeConfig()

    if isinstance(params, LineParams):
        return generate_line_points(params)
    if isinstance(params, CircleParams):
        return generate_circle_points(params.cx, params.cy, params.r, config.circle_samples)
    if isinstance(params, ParabolaParams):
        return generate_parabola_points(params, config.parabola_samples)
    raise TypeError(f"cannot materialize {type(params).__name__}")
