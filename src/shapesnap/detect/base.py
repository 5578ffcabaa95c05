"""
Shared estimator result record and scoring helpers.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from shapesnap.models import Candidate, DetectionSummary, RejectReason, ShapeKind


def clamp01(x):
    return max(0.0, min(1.0, x))


def falloff(value, tolerance):
    """1 at zero error, falling linearly to 0 at the tolerance."""
    return clamp01(1.0 - value / max(1e-6, tolerance))


def ramp(value, minimum, maximum=1.0):
    """0 at minimum, rising linearly to 1 at maximum."""
    return clamp01((value - minimum) / max(1e-6, maximum - minimum))


def all_finite(*values):
    return all(math.isfinite(v) for v in values)


@dataclass
class Detection:
    """
    Outcome of one estimator on one stroke.

    A detection with a reason set is a rejection: there is no candidate for
    that shape. Rejections still carry whatever score and metrics were
    computed before the failing gate, for diagnostics.
    """
    kind: ShapeKind
    score: float = 0.0
    params: object = None
    reason: Optional[RejectReason] = None
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def accepted(self):
        return self.reason is None and self.params is not None

    def to_candidate(self):
        if not self.accepted:
            return None
        return Candidate(score=clamp01(self.score), params=self.params)

    def summary(self):
        return DetectionSummary(
            kind=self.kind,
            accepted=self.accepted,
            reason=self.reason,
            score=float(self.score) if math.isfinite(self.score) else 0.0,
            metrics={
                k: v for k, v in self.metrics.items()
                if isinstance(v, bool) or math.isfinite(v)
            },
        )


def reject(kind, reason, score=0.0, params=None, **metrics):
    """Build a rejected Detection."""
    return Detection(
        kind=kind,
        score=score,
        params=params,
        reason=reason,
        metrics={k: _metric(v) for k, v in metrics.items()},
    )


def accept(kind, score, params, **metrics):
    """Build an accepted Detection."""
    return Detection(
        kind=kind,
        score=score,
        params=params,
        metrics={k: _metric(v) for k, v in metrics.items()},
    )


def _metric(value):
    if isinstance(value, (bool,)):
        return value
    return float(value)
