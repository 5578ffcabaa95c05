"""Tests for the line estimator."""

import math

import numpy as np
import pytest

from conftest import endpoints_match, make_arc, make_line
from shapesnap.detect.line import detect_line, fit_line_principal_axis
from shapesnap.geometry.measure import stroke_diagonal
from shapesnap.models import RejectReason, ShapeKind


class TestDetectLine:
    """Tests for line fitting and scoring."""

    def test_clean_diagonal(self, diagonal_line, params50, rng):
        """Perfectly straight samples score near 1 with exact endpoints."""
        detection = detect_line(diagonal_line, stroke_diagonal(diagonal_line), 4.0, params50, rng)

        assert detection.kind == ShapeKind.LINE
        assert detection.accepted
        assert detection.score > 0.99
        p1, p2 = detection.params.p1, detection.params.p2
        assert endpoints_match((p1.x, p1.y), (p2.x, p2.y), (0, 0), (200, 200), tol=0.5)

    def test_noisy_line_endpoints(self, params50, rng):
        """Jittered samples still give endpoints close to the true ones."""
        points = make_line((20, 30), (300, 120), n=40, noise=0.3)

        detection = detect_line(points, stroke_diagonal(points), 4.0, params50, rng)

        assert detection.accepted
        p1, p2 = detection.params.p1, detection.params.p2
        assert endpoints_match((p1.x, p1.y), (p2.x, p2.y), (20, 30), (300, 120), tol=2.0)
        assert detection.metrics["inlier_ratio"] == pytest.approx(1.0)

    def test_too_few_points(self, params50, rng):
        """A single sample cannot define a line."""
        detection = detect_line(np.array([[1.0, 1.0]]), 1.0, 4.0, params50, rng)

        assert not detection.accepted
        assert detection.reason == RejectReason.TOO_FEW_POINTS

    def test_needs_ten_inliers(self, params50, rng):
        """Short strokes fail the absolute inlier floor."""
        points = make_line((0, 0), (100, 0), n=6)

        detection = detect_line(points, stroke_diagonal(points), 4.0, params50, rng)

        assert detection.reason == RejectReason.INLIERS

    def test_circle_is_not_a_line(self, squarish_loop, params50, rng):
        """A closed loop has too few samples near any single line."""
        detection = detect_line(squarish_loop, stroke_diagonal(squarish_loop), 4.0, params50, rng)

        assert not detection.accepted
        assert detection.params is None or detection.reason is not None

    def test_same_seed_same_result(self, params50):
        """Seeding the random source makes the estimator reproducible."""
        points = make_line((0, 0), (150, 40), n=50, noise=0.8)
        diag = stroke_diagonal(points)

        first = detect_line(points, diag, 3.0, params50, np.random.default_rng(42))
        second = detect_line(points, diag, 3.0, params50, np.random.default_rng(42))

        assert first.score == second.score
        assert first.params == second.params

    def test_gentle_arc_rejected_when_strict(self, rng):
        """A visibly bowed stroke is not a line at the strictest setting."""
        from shapesnap.sensitivity import derive_params

        points = make_arc(0, 0, 150, 60, 60, n=40)

        detection = detect_line(points, stroke_diagonal(points), 2.0, derive_params(0), rng)

        assert not detection.accepted


class TestFitLinePrincipalAxis:
    """Tests for the principal-axis refinement."""

    def test_vertical_segment(self):
        """Vertical samples give a vertical segment spanning them."""
        points = np.column_stack([np.full(20, 7.0), np.linspace(-10, 30, 20)])

        p1, p2 = fit_line_principal_axis(points)

        assert p1[0] == pytest.approx(7.0)
        assert p2[0] == pytest.approx(7.0)
        assert sorted([p1[1], p2[1]]) == pytest.approx([-10, 30])

    def test_length_matches_extent(self):
        """Endpoints come from the extreme projections."""
        points = make_line((0, 0), (30, 40), n=11)

        p1, p2 = fit_line_principal_axis(points)

        assert math.hypot(*(p2 - p1)) == pytest.approx(50.0)

    def test_single_point(self):
        """One sample has no axis."""
        assert fit_line_principal_axis(np.array([[1.0, 2.0]])) is None
