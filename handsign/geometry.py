"""
Geometry helpers for 2-D hand landmarks.
"""
import math
from typing import List, Sequence

import numpy as np

from .types import Point

# Floor for the bounding-box scale so single-point inputs don't blow up
MIN_BOX_SIZE = 0.001


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two (x, y) points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize(landmarks: Sequence[Point]) -> List[Point]:
    """
    Map landmarks into their own bounding box.

    The minimum corner of the box moves to the origin and both axes are
    divided by the longer box side, so the dominant axis spans [0, 1].

    Args:
        landmarks: (x, y) points in any coordinate space

    Returns:
        Normalized (x, y) points, or an empty list for empty input
    """
    if len(landmarks) == 0:
        return []

    pts = np.asarray(landmarks, dtype=np.float64)
    mins = pts.min(axis=0)
    width, height = pts.max(axis=0) - mins
    size = max(width, height, MIN_BOX_SIZE)

    pts = (pts - mins) / size
    return [(float(x), float(y)) for x, y in pts]
