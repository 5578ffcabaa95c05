"""Pytest fixtures for shapesnap tests."""

import math

import numpy as np
import pytest


def make_line(p1, p2, n=40, noise=0.0, seed=7):
    """Evenly spaced samples from p1 to p2 with optional Gaussian jitter."""
    noise_rng = np.random.default_rng(seed)
    t = np.linspace(0.0, 1.0, n)[:, None]
    pts = np.array(p1, dtype=float) + t * (np.array(p2, dtype=float) - np.array(p1, dtype=float))
    if noise:
        pts = pts + noise_rng.normal(0.0, noise, pts.shape)
    return pts


def make_arc(cx, cy, r, start_deg, sweep_deg, n=60, noise=0.0, seed=7, wobble=0.0):
    """
    Samples along a circular arc.

    wobble adds a four-lobed radial deviation, which makes a hand-drawn
    looking, slightly square loop.
    """
    noise_rng = np.random.default_rng(seed)
    theta = np.radians(start_deg + np.linspace(0.0, sweep_deg, n))
    radius = r + wobble * np.cos(4 * theta)
    pts = np.column_stack([cx + radius * np.cos(theta), cy + radius * np.sin(theta)])
    if noise:
        pts = pts + noise_rng.normal(0.0, noise, pts.shape)
    return pts


def make_parabola(a, h, k, x0, x1, n=60, noise=0.0, seed=7, sideways=False):
    """Samples of y = a(x - h)^2 + k over [x0, x1]; sideways swaps the axes."""
    noise_rng = np.random.default_rng(seed)
    x = np.linspace(x0, x1, n)
    y = a * (x - h) ** 2 + k
    pts = np.column_stack([y, x]) if sideways else np.column_stack([x, y])
    if noise:
        pts = pts + noise_rng.normal(0.0, noise, pts.shape)
    return pts


def endpoints_match(p1, p2, expected1, expected2, tol):
    """True when the segment ends match the expected ends in either order."""
    def close(p, q):
        return math.hypot(p[0] - q[0], p[1] - q[1]) <= tol

    return ((close(p1, expected1) and close(p2, expected2))
            or (close(p1, expected2) and close(p2, expected1)))


@pytest.fixture
def rng():
    """Seeded generator for the sample-consensus estimators."""
    return np.random.default_rng(1234)


@pytest.fixture
def params50():
    """Sensitivity parameters at the default setting."""
    from shapesnap.sensitivity import derive_params
    return derive_params(50)


@pytest.fixture
def diagonal_line():
    """25 samples from (0, 0) to (200, 200)."""
    return make_line((0, 0), (200, 200), n=25)


@pytest.fixture
def squarish_loop():
    """60 samples, about 350 degrees around (100, 100) at radius 50."""
    return make_arc(100, 100, 50, 5, 350, n=60, wobble=1.5)


@pytest.fixture
def open_parabola():
    """Upward parabola with vertex (150, 80) over x in [50, 250]."""
    return make_parabola(0.01, 150, 80, 50, 250, n=60, noise=0.3)


@pytest.fixture
def default_config():
    """Default engine configuration."""
    from shapesnap.config import EngineConfig
    return EngineConfig()
