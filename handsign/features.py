"""
Geometric features of a single normalized hand.
"""
import logging
from dataclasses import dataclass
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .geometry import distance, normalize
from .types import HandObservation, Point

logger = logging.getLogger(__name__)

# Landmark indices of the 21-point hand skeleton
WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_TIP = 20
FINGER_TIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)

# Finger order used by every per-finger tuple below
THUMB, INDEX, MIDDLE, RING, PINKY = range(5)

MIN_HAND_SIZE = 0.05
MIN_MEAN_TIP_DISTANCE = 0.01

# Tip-to-wrist distance bands, as multiples of hand size
EXTENDED_FACTOR = 0.75
CLOSED_FACTOR = 0.35
TOGETHER_SPREAD_FACTOR = 0.35


@dataclass
class HandFeatures:
    """Per-frame quantities derived from a normalized hand."""
    landmarks: List[Point]
    wrist: Point
    tips: Tuple[Point, ...]
    tip_distances: Tuple[float, ...]     # tip -> wrist, thumb..pinky
    mean_tip_distance: float
    extension_ratios: Tuple[float, ...]  # tip distance / mean tip distance, zeros when collapsed
    reach_ratios: Tuple[float, ...]      # tip distance / hand size
    hand_size: float
    thumb_index_distance: float
    togetherness: float
    detection_score: float

    def finger_extended(self, finger: int) -> bool:
        return self.tip_distances[finger] > self.hand_size * EXTENDED_FACTOR

    def finger_closed(self, finger: int) -> bool:
        return self.tip_distances[finger] < self.hand_size * CLOSED_FACTOR

    @property
    def collapsed(self) -> bool:
        """Fingertips sit on the wrist, so extension ratios carry no shape."""
        return self.mean_tip_distance < MIN_MEAN_TIP_DISTANCE


def togetherness_score(landmarks: Sequence[Point]) -> float:
    """
    How spread the four non-thumb fingertips are.

    Mean pairwise distance between index, middle, ring and pinky tips, divided
    by 0.35 hand sizes and capped at 1.0. Low values mean the fingers are held
    together.
    """
    tips = [landmarks[i] for i in FINGER_TIPS[1:]]
    pairwise = [distance(a, b) for a, b in combinations(tips, 2)]
    hand_size = distance(landmarks[WRIST], landmarks[MIDDLE_MCP]) or 1.0
    return min(1.0, float(np.mean(pairwise)) / (hand_size * TOGETHER_SPREAD_FACTOR))


def extract_features(observation: HandObservation) -> Optional[HandFeatures]:
    """
    Compute the feature vector for one observation.

    Returns None when the hand is too small for the geometry to be trusted;
    callers treat that as "no classification". A hand whose fingertips have
    collapsed onto the wrist still gets features, flagged as `collapsed`.
    """
    landmarks = normalize(observation.landmarks)
    wrist = landmarks[WRIST]
    hand_size = distance(wrist, landmarks[MIDDLE_MCP])
    if hand_size < MIN_HAND_SIZE:
        logger.debug("Hand size %.4f below %.2f, skipping frame", hand_size, MIN_HAND_SIZE)
        return None

    tips = tuple(landmarks[i] for i in FINGER_TIPS)
    tip_distances = np.array([distance(tip, wrist) for tip in tips])
    mean_distance = float(tip_distances.mean())
    if mean_distance < MIN_MEAN_TIP_DISTANCE:
        extension_ratios = np.zeros(len(tips))
    else:
        extension_ratios = tip_distances / mean_distance

    return HandFeatures(
        landmarks=landmarks,
        wrist=wrist,
        tips=tips,
        tip_distances=tuple(float(d) for d in tip_distances),
        mean_tip_distance=mean_distance,
        extension_ratios=tuple(float(r) for r in extension_ratios),
        reach_ratios=tuple(float(r) for r in tip_distances / hand_size),
        hand_size=hand_size,
        thumb_index_distance=distance(tips[THUMB], tips[INDEX]),
        togetherness=togetherness_score(landmarks),
        detection_score=observation.score,
    )
