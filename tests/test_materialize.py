"""Tests for regenerating render polylines from shape parameters."""

import math

import pytest

from shapesnap.config import MaterializeConfig
from shapesnap.materialize import (
    generate_circle_points, generate_parabola_points, materialize,
)
from shapesnap.models import CircleParams, LineParams, Orientation, ParabolaParams, Point


class TestMaterialize:
    """Tests for shape materialization."""

    def test_line_is_its_endpoints(self):
        line = LineParams(p1=Point(x=1, y=2), p2=Point(x=30, y=40))

        assert materialize(line) == [Point(x=1, y=2), Point(x=30, y=40)]

    def test_circle_closed_polyline(self):
        """Circle samples lie on the circle and close the loop."""
        points = generate_circle_points(10, -5, 20, count=120)

        assert len(points) == 121
        for p in points:
            assert math.hypot(p.x - 10, p.y + 5) == pytest.approx(20)
        assert points[0].x == pytest.approx(points[-1].x)
        assert points[0].y == pytest.approx(points[-1].y)

    def test_parabola_covers_domain(self):
        """Parabola samples run from t_min to t_max on the curve."""
        parabola = ParabolaParams(
            orientation=Orientation.Y_OF_X, origin=100, a=0.02, b=-1, c=50,
            t_min=-40, t_max=60,
        )

        points = generate_parabola_points(parabola, count=140)

        assert len(points) == 141
        assert points[0].x == pytest.approx(60)
        assert points[-1].x == pytest.approx(160)
        for p in points:
            t = p.x - 100
            assert p.y == pytest.approx(0.02 * t * t - t + 50)

    def test_parabola_sample_floor(self):
        parabola = ParabolaParams(
            orientation=Orientation.X_OF_Y, origin=0, a=1, b=0, c=0, t_min=0, t_max=1,
        )

        assert len(generate_parabola_points(parabola, count=5)) == 31

    def test_config_sample_counts(self):
        config = MaterializeConfig(circle_samples=36)

        assert len(materialize(CircleParams(cx=0, cy=0, r=1), config)) == 37

    def test_unknown_params_rejected(self):
        with pytest.raises(TypeError):
            materialize({"kind": "line"})
