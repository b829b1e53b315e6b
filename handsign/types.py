"""
Type definitions for the hand gesture and sign classification pipeline.
"""
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Protocol, Tuple, runtime_checkable


Point = Tuple[float, float]

BaseGestureType = Literal["open", "closed", "pinch", "point", "unknown"]
SignType = Literal["letter_i", "love", "you", "none"]
FrameStatus = Literal["no_hand", "unclear", "settling", "stable"]

NUM_LANDMARKS = 21
DEFAULT_DETECTION_SCORE = 0.8

# Labels that mean "frame seen, nothing recognized"
NO_MATCH_TYPES = ("unknown", "none")


class InvalidObservationError(ValueError):
    """Raised when a hand observation does not match the 21-point skeleton contract."""


@dataclass
class HandObservation:
    """One frame's hand: 21 ordered (x, y) landmarks plus the model's detection score."""
    landmarks: List[Point]
    score: float = DEFAULT_DETECTION_SCORE

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise InvalidObservationError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )
        if not 0.0 <= self.score <= 1.0:
            raise InvalidObservationError(f"Detection score out of range [0, 1]: {self.score}")
        points = []
        for i, point in enumerate(self.landmarks):
            try:
                x, y = point
                points.append((float(x), float(y)))
            except (TypeError, ValueError) as e:
                raise InvalidObservationError(f"Landmark {i} is not an (x, y) pair: {point!r}") from e
        self.landmarks = points


@dataclass
class GestureResult:
    """Classification of a single frame (or the debounced stable gesture)."""
    type: str
    confidence: float
    message: Optional[str] = None
    landmarks: List[Point] = field(default_factory=list)

    @property
    def is_match(self) -> bool:
        return self.type not in NO_MATCH_TYPES


@dataclass
class HistoryEntry:
    """One pushed classification as remembered by the stabilizer."""
    type: str
    confidence: float
    message: str
    timestamp: float


@dataclass
class GestureChangeEvent:
    """Emitted when the stable gesture changes (None means no stable gesture)."""
    previous: Optional[str]
    current: Optional[GestureResult]
    timestamp: float


@dataclass
class FrameResult:
    """Everything the pipeline reports for one processed frame."""
    status: FrameStatus
    frame: Optional[GestureResult] = None   # this frame's classification
    stable: Optional[GestureResult] = None  # debounced output, None = no gesture
    event: Optional[GestureChangeEvent] = None


@runtime_checkable
class EffectSchedulerProto(Protocol):
    """Abstract protocol for downstream consumers of stable gesture changes."""

    async def on_gesture_change(self, event: GestureChangeEvent) -> None:
        """React to a change of the stable gesture."""
        ...
