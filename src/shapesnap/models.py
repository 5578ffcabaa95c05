"""
Pydantic data models for the shapesnap recognition engine.

Inputs (strokes) and outputs (candidates, recognition results, diagnostic
reports) flow through these validated models. Estimators work on numpy arrays
internally and only build models at the boundary.
"""

import math
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ShapeKind(str, Enum):
    """Shape kinds the engine can recognize."""
    LINE = "line"
    CIRCLE = "circle"
    PARABOLA = "parabola"


class Orientation(str, Enum):
    """Axis a parabola is expressed along."""
    Y_OF_X = "yOfX"  # y = a*t^2 + b*t + c, t = x - origin
    X_OF_Y = "xOfY"  # x = a*t^2 + b*t + c, t = y - origin


class RejectReason(str, Enum):
    """Why an estimator produced no candidate."""
    TOO_FEW_POINTS = "too-few-points"
    TOO_SMALL = "too-small"
    ASPECT = "aspect"
    CLOSEDNESS = "closedness"
    INLIERS = "inliers"
    COVERAGE = "coverage"
    FIT_FAILED = "fit-failed"
    SCORE = "score"


class Point(BaseModel):
    """A sample in world space. Pressure is carried but ignored."""
    x: float
    y: float
    pressure: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class Bounds(BaseModel):
    """Axis-aligned bounding box of a point set."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(frozen=True)

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y

    @property
    def diagonal(self):
        return math.hypot(self.width, self.height)


class Stroke(BaseModel):
    """A captured pen stroke handed to the engine."""
    points: List[Point] = Field(..., min_length=2)
    width: float = Field(default=2.0, ge=0.0)
    sensitivity: int = Field(default=50, ge=0, le=100)

    model_config = ConfigDict(extra="ignore")


class LineParams(BaseModel):
    """Line segment between two refined endpoints."""
    kind: Literal[ShapeKind.LINE] = ShapeKind.LINE
    p1: Point
    p2: Point

    model_config = ConfigDict(frozen=True, extra="forbid")


class CircleParams(BaseModel):
    """Circle by center and radius."""
    kind: Literal[ShapeKind.CIRCLE] = ShapeKind.CIRCLE
    cx: float
    cy: float
    r: float = Field(..., gt=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class ParabolaParams(BaseModel):
    """
    Axis-aligned parabola value = a*t^2 + b*t + c with t = coord - origin.

    For Y_OF_X the coordinate is x and the value is y; for X_OF_Y the roles
    swap. The domain is [t_min, t_max].
    """
    kind: Literal[ShapeKind.PARABOLA] = ShapeKind.PARABOLA
    orientation: Orientation
    origin: float
    a: float
    b: float
    c: float
    t_min: float
    t_max: float

    model_config = ConfigDict(frozen=True, extra="forbid")

    def evaluate(self, t):
        """Return the world (x, y) of parameter t."""
        value = self.a * t * t + self.b * t + self.c
        if self.orientation == Orientation.Y_OF_X:
            return self.origin + t, value
        return value, self.origin + t


ShapeParams = Annotated[
    Union[LineParams, CircleParams, ParabolaParams],
    Field(discriminator="kind"),
]


class Candidate(BaseModel):
    """A scored shape hypothesis."""
    score: float = Field(..., ge=0.0, le=1.0)
    params: ShapeParams

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def kind(self):
        return self.params.kind


class RecognitionResult(BaseModel):
    """
    Outcome of one recognition call.

    Unrecognized results carry no candidate and no render points; the caller
    keeps its original freehand stroke.
    """
    candidate: Optional[Candidate] = None
    render_points: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def unrecognized(cls):
        return cls()

    @property
    def recognized(self):
        return self.candidate is not None

    @property
    def kind(self):
        return self.candidate.kind if self.candidate else None


class RankedCandidate(BaseModel):
    """A candidate offered for conversion together with its render polyline."""
    candidate: Candidate
    render_points: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class DetectionSummary(BaseModel):
    """One estimator's outcome, for diagnostics."""
    kind: ShapeKind
    accepted: bool
    reason: Optional[RejectReason] = None
    score: float = 0.0
    metrics: Dict[str, Union[bool, float]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class DiagnosticReport(BaseModel):
    """Per-estimator breakdown of a recognition attempt."""
    sensitivity: int
    accept_score: float
    point_count: int = 0
    gate: Optional[RejectReason] = None
    detections: List[DetectionSummary] = Field(default_factory=list)
    snapped: Optional[ShapeKind] = None

    model_config = ConfigDict(extra="forbid")

    @property
    def best(self):
        """Highest scoring accepted detection, if any."""
        accepted = [d for d in self.detections if d.accepted]
        if not accepted:
            return None
        return max(accepted, key=lambda d: d.score)
