"""
Candidate arbiter for freehand stroke recognition.

Simplifies the stroke, runs the line, circle and parabola estimators on the
same points, and accepts the best candidate only if it clears its own
per-shape threshold. Every call is independent: parameters, random source
and intermediate results are created per call and never shared.
"""

import numpy as np

from shapesnap.config import EngineConfig
from shapesnap.detect.circle import detect_circle
from shapesnap.detect.line import detect_line
from shapesnap.detect.parabola import detect_parabola
from shapesnap.geometry.measure import as_point_array, stroke_diagonal
from shapesnap.geometry.simplify import (
    downsample_points, simplification_distance, simplify_stroke_points,
)
from shapesnap.materialize import materialize
from shapesnap.models import (
    DiagnosticReport, RankedCandidate, RecognitionResult, RejectReason,
)
from shapesnap.sensitivity import derive_params
from shapesnap.tracer import get_tracer, trace

DETECTORS = (detect_line, detect_circle, detect_parabola)


def make_rng(rng=None):
    """
    Resolve the random source for sample consensus.

    None gives a freshly seeded generator, an int seeds a new generator, and
    an existing numpy Generator is used as is.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _coerce_width(stroke_width):
    try:
        width = float(stroke_width)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(width) or width < 0:
        return 0.0
    return width


def prepare_stroke(points, stroke_width, config=None):
    """
    Simplify a raw stroke and apply the size gates.

    Returns (points, diag, None) when the stroke may be fitted, otherwise
    (points, diag, reason) with the gate that failed.
    """
    config = config or EngineConfig()
    gate = config.gate

    raw = as_point_array(points)
    if len(raw) < gate.min_points:
        return raw, 0.0, RejectReason.TOO_FEW_POINTS

    min_dist = simplification_distance(
        stroke_width, config.simplify.min_dist_floor, config.simplify.width_factor,
    )
    simplified = simplify_stroke_points(raw, min_dist)
    if len(simplified) < gate.min_points:
        return simplified, 0.0, RejectReason.TOO_FEW_POINTS

    diag = stroke_diagonal(simplified)
    if diag < gate.min_diagonal:
        return simplified, diag, RejectReason.TOO_SMALL
    return simplified, diag, None


def run_detectors(points, diag, stroke_width, params, rng):
    """Run every estimator unconditionally and return their detections."""
    return [detect(points, diag, stroke_width, params, rng) for detect in DETECTORS]


def _log_detections(detections, params):
    tracer = get_tracer()
    for d in detections:
        status = "ok" if d.accepted else f"reject({d.reason.value})"
        tracer.event(
            f"{d.kind.value}:{status} s={d.score:.2f} accept={params.accept_threshold(d.kind):.2f}",
            level="DEBUG",
        )


@trace(label="recognize")
def recognize(points, stroke_width, sensitivity, rng=None, config=None):
    """
    Recognize a freehand stroke as a line, circle or parabola.

    Args:
        points: stroke samples in drawing order
        stroke_width: pen width in world units
        sensitivity: 0-100, higher accepts rougher strokes
        rng: seed or numpy Generator for the sample-consensus estimators
        config: EngineConfig (defaults if omitted)

    Returns:
        RecognitionResult; unrecognized when no candidate clears its
        per-shape acceptance threshold
    """
    tracer = get_tracer()
    config = config or EngineConfig()
    width = _coerce_width(stroke_width)

    simplified, diag, gate = prepare_stroke(points, width, config)
    if gate is not None:
        tracer.event(f"Stroke gated: {gate.value}", level="DEBUG", points=len(simplified))
        return RecognitionResult.unrecognized()

    params = derive_params(sensitivity)
    detections = run_detectors(simplified, diag, width, params, make_rng(rng))
    if config.diagnostics.enabled:
        _log_detections(detections, params)

    accepted = sorted(
        (d for d in detections if d.accepted), key=lambda d: d.score, reverse=True,
    )
    if not accepted:
        tracer.event("No shape candidates")
        return RecognitionResult.unrecognized()

    best = accepted[0]
    threshold = params.accept_threshold(best.kind)
    if best.score < threshold:
        tracer.event(
            f"Best candidate {best.kind.value} below threshold",
            score=best.score, threshold=threshold,
        )
        return RecognitionResult.unrecognized()

    candidate = best.to_candidate()
    tracer.event(f"Recognized {best.kind.value}", score=best.score)
    return RecognitionResult(
        candidate=candidate,
        render_points=materialize(candidate.params, config.materialize),
    )


def recognize_stroke(stroke, rng=None, config=None):
    """Recognize a Stroke model using its own width and sensitivity."""
    return recognize(stroke.points, stroke.width, stroke.sensitivity, rng=rng, config=config)


@trace(label="rank_candidates")
def rank_candidates(points, stroke_width, sensitivity=50, rng=None, config=None):
    """
    All candidates that clear their own acceptance threshold, best first.

    Used to offer the user a choice of conversions after a stroke ends
    rather than snapping to the single best shape.
    """
    config = config or EngineConfig()
    width = _coerce_width(stroke_width)

    simplified, diag, gate = prepare_stroke(points, width, config)
    if gate is not None:
        return []

    params = derive_params(sensitivity)
    detections = run_detectors(simplified, diag, width, params, make_rng(rng))

    ranked = [
        d for d in detections
        if d.accepted and d.score >= params.accept_threshold(d.kind)
    ]
    ranked.sort(key=lambda d: d.score, reverse=True)

    results = []
    for d in ranked:
        candidate = d.to_candidate()
        results.append(RankedCandidate(
            candidate=candidate,
            render_points=materialize(candidate.params, config.materialize),
        ))
    get_tracer().event(f"Ranked {len(results)} conversion candidates")
    return results


@trace(label="diagnose_stroke")
def diagnose_stroke(points, stroke_width, sensitivity, rng=None, config=None, max_points=None):
    """
    Per-estimator breakdown of how a stroke would be judged.

    Runs on a downsampled copy of the simplified stroke (at most max_points
    samples, default from config) and reports every estimator's outcome,
    including rejection reasons and quality metrics.
    """
    tracer = get_tracer()
    config = config or EngineConfig()
    width = _coerce_width(stroke_width)
    max_points = max_points or config.diagnostics.max_points
    params = derive_params(sensitivity)

    report = DiagnosticReport(
        sensitivity=params.sensitivity,
        accept_score=params.accept_score,
    )

    simplified, diag, gate = prepare_stroke(points, width, config)
    if gate is not None:
        report.gate = gate
        report.point_count = len(simplified)
        return report

    pts = downsample_points(simplified, max_points)
    diag = stroke_diagonal(pts)
    detections = run_detectors(pts, diag, width, params, make_rng(rng))
    _log_detections(detections, params)

    report.point_count = len(pts)
    report.detections = [d.summary() for d in detections]

    best = report.best
    if best is not None and best.score >= params.accept_threshold(best.kind):
        report.snapped = best.kind

    tracer.event(
        f"Diagnosed sens={report.sensitivity} accept={params.accept_score:.2f} "
        f"snapped={report.snapped.value if report.snapped else 'none'}"
    )
    return report
