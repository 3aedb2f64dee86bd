"""Rendering constants."""

from __future__ import annotations

from .color import Color

# Precision of opacity values in digits after the decimal point.
# A value of 3 corresponds to a precision of 10^-3.
OPACITY_PRECISION = 3

# Synthetic stroke used for every shape in outline view mode.
OUTLINE_STROKE_COLOR = Color.BLACK
OUTLINE_STROKE_WEIGHT = 1.0
