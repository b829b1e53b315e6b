"""
Hand landmark detection using the MediaPipe Tasks hand landmarker.
"""
import logging
from pathlib import Path
from typing import Any, Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .types import DEFAULT_DETECTION_SCORE, HandObservation

logger = logging.getLogger(__name__)

# Bones of the 21-point hand skeleton
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (0, 9), (9, 10), (10, 11), (11, 12),
    (0, 13), (13, 14), (14, 15), (15, 16),
    (0, 17), (17, 18), (18, 19), (19, 20),
]


class HandsTracker:
    """Hand landmark tracker using the MediaPipe HandLandmarker task."""

    def __init__(self, model_path: str, num_hands: int = 1,
                 min_detection_conf: float = 0.5, min_presence_conf: float = 0.5,
                 min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.

        Args:
            model_path: Path to the hand_landmarker.task bundle
            num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_presence_conf: Minimum hand presence score
            min_tracking_conf: Minimum confidence for hand tracking
        """
        if not Path(model_path).exists():
            raise RuntimeError(f"Hand landmarker model not found: {model_path}")

        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=num_hands,
            min_hand_detection_confidence=min_detection_conf,
            min_hand_presence_confidence=min_presence_conf,
            min_tracking_confidence=min_tracking_conf,
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        logger.info("MediaPipe HandLandmarker initialized from %s", model_path)

    def process(self, frame_bgr: np.ndarray, timestamp_ms: int) -> Optional[HandObservation]:
        """
        Process a frame and return the first detected hand.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonically increasing frame timestamp

        Returns:
            HandObservation with 21 (x, y) coordinates in [0..1] range, or None if no hand detected
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self.landmarker.detect_for_video(image, timestamp_ms)
        return observation_from_result(result)

    def close(self) -> None:
        """Release the underlying landmarker."""
        self.landmarker.close()


def observation_from_result(result: Any) -> Optional[HandObservation]:
    """
    Convert a HandLandmarkerResult into a HandObservation for its first hand.

    The handedness score is used as the detection score.
    """
    if not result.hand_landmarks:
        return None

    landmarks = [(lm.x, lm.y) for lm in result.hand_landmarks[0]]
    score = DEFAULT_DETECTION_SCORE
    if result.handedness and result.handedness[0]:
        score = float(result.handedness[0][0].score)

    return HandObservation(landmarks=landmarks, score=min(1.0, max(0.0, score)))


def draw_landmarks(frame: np.ndarray, observation: HandObservation) -> np.ndarray:
    """
    Draw the hand skeleton on the frame.

    Args:
        frame: Input frame
        observation: Hand with (x, y) coordinates in [0..1] range

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]
    points = [(int(x * width), int(y * height)) for x, y in observation.landmarks]

    for i, j in HAND_CONNECTIONS:
        cv2.line(frame, points[i], points[j], (196, 205, 78), 2)

    for px, py in points:
        cv2.circle(frame, (px, py), 5, (196, 205, 78), -1)

    return frame
