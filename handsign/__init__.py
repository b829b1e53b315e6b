"""
Hand Sign Recognition

Classifies a stream of 21-point hand landmark frames into debounced gestures
(open, closed, pinch, point) and signs (I, LOVE, YOU).
"""

__version__ = "0.1.0"
__author__ = "Hand Sign Recognition Team"
