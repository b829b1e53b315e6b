"""
Human-readable status text for frame results.
"""
from typing import Tuple

from .types import FrameResult

# (overlay text, short status) per stable gesture
GESTURE_TEXT = {
    "letter_i": ('Letter "I" detected!', "Letter I"),
    "love": ('Word "LOVE" detected!', "LOVE"),
    "you": ('Word "YOU" detected!', "YOU"),
    "open": ("Open Hand", "Open Hand"),
    "closed": ("Closed Fist", "Closed Fist"),
    "pinch": ("Pinch Gesture", "Pinch"),
    "point": ("Pointing Gesture", "Pointing"),
}

WAITING_TEXT = "Waiting for hand..."
UNCLEAR_TEXT = "Show clear gesture"
SETTLING_TEXT = "Hold the gesture..."


def describe_result(result: FrameResult) -> Tuple[str, str]:
    """
    Describe a frame result for the overlay.

    Returns:
        (message, status) strings
    """
    if result.status == "no_hand":
        return WAITING_TEXT, "Ready"
    if result.status == "unclear":
        return UNCLEAR_TEXT, "Ready"
    if result.stable is None:
        return SETTLING_TEXT, "Ready"

    return GESTURE_TEXT.get(result.stable.type, (result.stable.message or result.stable.type, "Ready"))


def confidence_color(confidence: float) -> Tuple[int, int, int]:
    """BGR color for a confidence value: teal, yellow, orange, red from high to low."""
    if confidence > 0.85:
        return (196, 205, 78)
    if confidence > 0.7:
        return (87, 202, 254)
    if confidence > 0.5:
        return (67, 159, 255)
    return (107, 107, 255)
