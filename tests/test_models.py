"""Tests for the data models."""

import pytest
from pydantic import ValidationError

from shapesnap.models import (
    Candidate, CircleParams, LineParams, Orientation, ParabolaParams, Point,
    RecognitionResult, ShapeKind, Stroke,
)


class TestStroke:
    """Tests for stroke validation."""

    def test_defaults(self):
        stroke = Stroke(points=[{"x": 0, "y": 0}, {"x": 5, "y": 5}])

        assert stroke.width == 2.0
        assert stroke.sensitivity == 50
        assert stroke.points[1] == Point(x=5, y=5)

    def test_needs_two_points(self):
        with pytest.raises(ValidationError):
            Stroke(points=[{"x": 0, "y": 0}])

    def test_sensitivity_range(self):
        with pytest.raises(ValidationError):
            Stroke(points=[{"x": 0, "y": 0}, {"x": 1, "y": 1}], sensitivity=101)

    def test_pressure_carried(self):
        stroke = Stroke(points=[{"x": 0, "y": 0, "pressure": 0.3}, {"x": 1, "y": 1}])

        assert stroke.points[0].pressure == 0.3
        assert stroke.points[1].pressure is None


class TestCandidate:
    """Tests for candidates and their shape parameters."""

    def test_score_bounded(self):
        """Scores outside [0, 1] are invalid."""
        with pytest.raises(ValidationError):
            Candidate(score=1.01, params=CircleParams(cx=0, cy=0, r=1))

    def test_radius_positive(self):
        with pytest.raises(ValidationError):
            CircleParams(cx=0, cy=0, r=0)

    def test_kind_discriminates_params(self):
        """Serialized candidates load back into the right params type."""
        candidate = Candidate(
            score=0.8,
            params=LineParams(p1=Point(x=0, y=0), p2=Point(x=3, y=4)),
        )

        data = candidate.model_dump(mode="json")
        loaded = Candidate.model_validate(data)

        assert data["params"]["kind"] == "line"
        assert isinstance(loaded.params, LineParams)
        assert loaded.kind == ShapeKind.LINE

    def test_params_frozen(self):
        circle = CircleParams(cx=0, cy=0, r=1)

        with pytest.raises(ValidationError):
            circle.r = 2


class TestParabolaParams:
    """Tests for evaluating parabolas."""

    def test_evaluate_y_of_x(self):
        parabola = ParabolaParams(
            orientation=Orientation.Y_OF_X, origin=10, a=1, b=0, c=2, t_min=-1, t_max=1,
        )

        assert parabola.evaluate(3) == (13, 11)

    def test_evaluate_x_of_y(self):
        parabola = ParabolaParams(
            orientation=Orientation.X_OF_Y, origin=10, a=1, b=0, c=2, t_min=-1, t_max=1,
        )

        assert parabola.evaluate(3) == (11, 13)

    def test_orientation_serialized_name(self):
        parabola = ParabolaParams(
            orientation=Orientation.X_OF_Y, origin=0, a=1, b=0, c=0, t_min=0, t_max=1,
        )

        assert parabola.model_dump(mode="json")["orientation"] == "xOfY"


class TestRecognitionResult:
    def test_unrecognized(self):
        result = RecognitionResult.unrecognized()

        assert not result.recognized
        assert result.kind is None
        assert result.render_points == []
