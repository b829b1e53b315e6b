"""
Gesture classifiers and the per-frame processor that debounces their output.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from .config import Cfg
from .features import (
    INDEX, MIDDLE, PINKY, RING, THUMB,
    HandFeatures, extract_features,
)
from .stabilizer import GestureStabilizer
from .types import FrameResult, GestureChangeEvent, GestureResult, HandObservation

logger = logging.getLogger(__name__)

MAX_CONFIDENCE = 0.99

# Base classifier calibration
BASE_MIN_CONFIDENCE = 0.72
OPEN_RATIO_RANGE = (0.85, 1.3)
CLOSED_RATIO_MAX = 0.45
PINCH_DISTANCE_FACTOR = 0.18
PINCH_CONFIDENCE_FACTOR = 0.25
PINCH_OTHER_RATIO_MIN = 0.5
POINT_INDEX_RATIO_MIN = 1.15
POINT_THUMB_RATIO_MAX = 0.55
POINT_OTHER_RATIO_MAX = 0.65
POINT_SEPARATION_FACTOR = 0.22

# Sign classifier calibration
LETTER_I_THUMB_FACTOR = 0.45
LETTER_I_MIN_CONFIDENCE = 0.78
LOVE_WRIST_Y_MIN = 0.65
LOVE_WRIST_X_RANGE = (0.35, 0.65)
LOVE_TOGETHERNESS_MAX = 0.12
LOVE_POSITION_GAIN = 2.86
LOVE_MIN_CONFIDENCE = 0.68
YOU_SEPARATION_FACTOR = 0.28
YOU_MIN_CONFIDENCE = 0.78

SIGN_TYPES = ("letter_i", "love", "you")


@dataclass(frozen=True)
class GestureRule:
    """One entry of an ordered classification table."""
    type: str
    matches: Callable[[HandFeatures], bool]
    confidence: Callable[[HandFeatures], float]
    message: Optional[str] = None
    min_confidence: float = 0.0


def _open_confidence(f: HandFeatures) -> float:
    ratios = np.asarray(f.extension_ratios)
    variance = float(ratios.var())
    ideal_deviation = abs(float(ratios.mean()) - 1.0)
    return max(0.0, 0.92 - variance * 1.8 - ideal_deviation * 2.5)


def _is_open(f: HandFeatures) -> bool:
    low, high = OPEN_RATIO_RANGE
    return all(low < r < high for r in f.extension_ratios)


def _is_closed(f: HandFeatures) -> bool:
    # Mean-relative ratios always average 1.0, so closure is measured against hand size
    return all(r < CLOSED_RATIO_MAX for r in f.reach_ratios)


def _is_pinch(f: HandFeatures) -> bool:
    ratios = f.extension_ratios
    return (f.thumb_index_distance < f.hand_size * PINCH_DISTANCE_FACTOR
            and all(ratios[i] > PINCH_OTHER_RATIO_MIN for i in (MIDDLE, RING, PINKY)))


def _is_point(f: HandFeatures) -> bool:
    ratios = f.extension_ratios
    others_closed = (ratios[THUMB] < POINT_THUMB_RATIO_MAX
                     and all(ratios[i] < POINT_OTHER_RATIO_MAX for i in (MIDDLE, RING, PINKY)))
    return (ratios[INDEX] > POINT_INDEX_RATIO_MIN
            and others_closed
            and f.thumb_index_distance > f.hand_size * POINT_SEPARATION_FACTOR)


# Evaluated in order; the first matching rule decides the frame
BASE_RULES: Tuple[GestureRule, ...] = (
    GestureRule("open", _is_open, _open_confidence),
    GestureRule("closed", _is_closed, lambda f: 0.95 - max(f.reach_ratios) * 0.5),
    GestureRule("pinch", _is_pinch,
                lambda f: 1.0 - f.thumb_index_distance / (f.hand_size * PINCH_CONFIDENCE_FACTOR)),
    GestureRule("point", _is_point,
                lambda f: min(0.95, (f.extension_ratios[INDEX] - 1.0) * 1.8)),
)


def _is_letter_i(f: HandFeatures) -> bool:
    return (f.finger_extended(PINKY)
            and all(f.finger_closed(i) for i in (INDEX, MIDDLE, RING))
            and f.tip_distances[THUMB] < f.hand_size * LETTER_I_THUMB_FACTOR)


def _letter_i_confidence(f: HandFeatures) -> float:
    d = f.tip_distances
    pinky = min(1.0, d[PINKY] / f.hand_size)
    others = 1.0 - min(1.0, (d[INDEX] + d[MIDDLE] + d[RING]) / (f.hand_size * 3))
    return (pinky + others) / 2


def _is_love(f: HandFeatures) -> bool:
    wrist_x, wrist_y = f.wrist
    low, high = LOVE_WRIST_X_RANGE
    return wrist_y > LOVE_WRIST_Y_MIN and low < wrist_x < high and f.togetherness < LOVE_TOGETHERNESS_MAX


def _love_confidence(f: HandFeatures) -> float:
    position = min(1.0, (f.wrist[1] - LOVE_WRIST_Y_MIN) * LOVE_POSITION_GAIN)
    return (position + (1.0 - f.togetherness) + f.detection_score) / 3


def _is_you(f: HandFeatures) -> bool:
    return (f.finger_extended(INDEX)
            and all(f.finger_closed(i) for i in (THUMB, MIDDLE, RING, PINKY))
            and f.thumb_index_distance > f.hand_size * YOU_SEPARATION_FACTOR)


def _you_confidence(f: HandFeatures) -> float:
    d = f.tip_distances
    index = min(1.0, d[INDEX] / f.hand_size)
    others = 1.0 - min(1.0, (d[THUMB] + d[MIDDLE] + d[RING] + d[PINKY]) / (f.hand_size * 4))
    return (index + others) / 2


# Evaluated in order; a sign wins only once its confidence clears its own floor
SIGN_RULES: Tuple[GestureRule, ...] = (
    GestureRule("letter_i", _is_letter_i, _letter_i_confidence, "I", LETTER_I_MIN_CONFIDENCE),
    GestureRule("love", _is_love, _love_confidence, "LOVE", LOVE_MIN_CONFIDENCE),
    GestureRule("you", _is_you, _you_confidence, "YOU", YOU_MIN_CONFIDENCE),
)


class BaseGestureClassifier:
    """Open / closed / pinch / point classifier over extension ratios."""

    def __init__(self, rules: Sequence[GestureRule] = BASE_RULES):
        self.rules = tuple(rules)

    def classify(self, observation: HandObservation) -> GestureResult:
        features = extract_features(observation)
        if features is None:
            return GestureResult(type="unknown", confidence=0.0, landmarks=observation.landmarks)
        return self.classify_features(features, observation)

    def classify_features(self, features: HandFeatures, observation: HandObservation) -> GestureResult:
        """
        Apply the rule table to precomputed features.

        Only the first matching rule is scored. If its confidence misses the
        0.72 floor the frame is 'unknown'; later rules are not consulted.
        """
        if features.collapsed:
            logger.debug("Fingertips collapsed onto wrist (mean %.4f)", features.mean_tip_distance)
            return GestureResult(type="unknown", confidence=0.0, landmarks=observation.landmarks)

        for rule in self.rules:
            if not rule.matches(features):
                continue
            confidence = rule.confidence(features)
            logger.debug("Base rule %s matched (confidence %.3f)", rule.type, confidence)
            if confidence >= BASE_MIN_CONFIDENCE:
                return GestureResult(
                    type=rule.type,
                    confidence=min(MAX_CONFIDENCE, confidence),
                    landmarks=observation.landmarks,
                )
            break
        return GestureResult(type="unknown", confidence=0.0, landmarks=observation.landmarks)


class SignClassifier:
    """Detects the I / LOVE / YOU signs from hand shape and position."""

    def __init__(self, rules: Sequence[GestureRule] = SIGN_RULES):
        self.rules = tuple(rules)

    def classify(self, observation: HandObservation) -> GestureResult:
        features = extract_features(observation)
        if features is None:
            return GestureResult(type="none", confidence=0.0, landmarks=observation.landmarks)
        return self.classify_features(features, observation)

    def classify_features(self, features: HandFeatures, observation: HandObservation) -> GestureResult:
        for rule in self.rules:
            if not rule.matches(features):
                continue
            confidence = rule.confidence(features)
            logger.debug("Sign rule %s matched (confidence %.3f)", rule.type, confidence)
            if confidence > rule.min_confidence:
                return GestureResult(
                    type=rule.type,
                    confidence=min(MAX_CONFIDENCE, confidence),
                    message=rule.message,
                    landmarks=observation.landmarks,
                )
        return GestureResult(type="none", confidence=0.0, landmarks=observation.landmarks)


def classify_observation(observation: HandObservation,
                         sign_classifier: SignClassifier,
                         base_classifier: BaseGestureClassifier,
                         sign_min_confidence: float = 0.7) -> GestureResult:
    """
    Classify one frame: signs first, general gestures only as a fallback.

    Args:
        observation: The first detected hand of the frame
        sign_classifier: High-precision sign classifier, tried first
        base_classifier: General classifier, used when no sign is confident
        sign_min_confidence: Confidence a sign needs to be authoritative

    Returns:
        The frame's classification ('unknown' when nothing was recognized)
    """
    features = extract_features(observation)
    if features is None:
        return GestureResult(type="unknown", confidence=0.0, landmarks=observation.landmarks)

    sign = sign_classifier.classify_features(features, observation)
    if sign.is_match and sign.confidence > sign_min_confidence:
        return sign
    return base_classifier.classify_features(features, observation)


class GestureProcessor:
    """
    Runs the classification pipeline frame by frame and debounces the result.

    The processor exclusively owns its stabilizer; calls to process_frame are
    serialized so a single instance may be shared between threads.
    """

    def __init__(self, cfg: Cfg,
                 stabilizer: Optional[GestureStabilizer] = None,
                 sign_classifier: Optional[SignClassifier] = None,
                 base_classifier: Optional[BaseGestureClassifier] = None):
        """Initialize the processor with configuration."""
        self.cfg = cfg
        self.stabilizer = stabilizer or GestureStabilizer(
            history_size=cfg.stabilizer.history_size,
            window=cfg.stabilizer.window,
            min_votes=cfg.stabilizer.min_votes,
            min_confidence=cfg.stabilizer.min_confidence,
        )
        self.sign_classifier = sign_classifier or SignClassifier()
        self.base_classifier = base_classifier or BaseGestureClassifier()
        self.last_stable_type: Optional[str] = None
        self._lock = threading.Lock()

    def process_frame(self, observation: Optional[HandObservation],
                      t_now: Optional[float] = None) -> FrameResult:
        """
        Process one frame and return its classification and stable gesture.

        Args:
            observation: First detected hand, or None if no hand was found
            t_now: Frame timestamp in seconds (defaults to time.time())

        Returns:
            FrameResult with status, frame classification, stable gesture and
            a change event when the stable gesture changed
        """
        if t_now is None:
            t_now = time.time()

        with self._lock:
            if observation is None:
                self.stabilizer.clear()
                return FrameResult(status="no_hand", event=self._track_change(None, t_now))

            frame = classify_observation(
                observation,
                self.sign_classifier,
                self.base_classifier,
                sign_min_confidence=self.cfg.pipeline.sign_min_confidence,
            )

            if not self._admit(frame):
                return FrameResult(status="unclear", frame=frame, event=self._track_change(None, t_now))

            self.stabilizer.push(frame, t_now)
            stable = self.stabilizer.stable()
            return FrameResult(
                status="stable" if stable is not None else "settling",
                frame=frame,
                stable=stable,
                event=self._track_change(stable, t_now),
            )

    def reset(self) -> None:
        """Forget history and the last reported stable gesture."""
        with self._lock:
            self.stabilizer.clear()
            self.last_stable_type = None

    def _admit(self, frame: GestureResult) -> bool:
        if not frame.is_match:
            return False
        if frame.type in SIGN_TYPES:
            return frame.confidence > self.cfg.pipeline.sign_min_confidence
        return frame.confidence > self.cfg.pipeline.base_min_confidence

    def _track_change(self, stable: Optional[GestureResult], t_now: float) -> Optional[GestureChangeEvent]:
        current_type = stable.type if stable is not None else None
        if current_type == self.last_stable_type:
            return None

        event = GestureChangeEvent(previous=self.last_stable_type, current=stable, timestamp=t_now)
        logger.info("Stable gesture changed: %s -> %s", self.last_stable_type, current_type)
        self.last_stable_type = current_type
        return event
