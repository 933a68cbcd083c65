"""
Easing Functions for the Circadian Curve

Each function maps linear progress t in [0.0, 1.0] to eased progress in
the same range.
"""


def clamp_progress(t: float) -> float:
    """Clamp progress to [0.0, 1.0]"""
    return max(0.0, min(1.0, t))


def ease_linear(t: float) -> float:
    """Linear - constant rate of change."""
    return t


def ease_in_quadratic(t: float) -> float:
    """Quadratic ease-in - slow start, fast finish.

    Used for the final wind-down so the drop toward the warmest
    temperature happens mostly right before sleep.
    """
    return t * t


def ease_out_quadratic(t: float) -> float:
    """Quadratic ease-out - fast start, slow finish.

    Used for the morning boost: most of the rise happens early.
    """
    return 1.0 - (1.0 - t) * (1.0 - t)
