from __future__ import annotations

import math

RGB = tuple[int, int, int]

BASE_COLOR: RGB = (210, 180, 140)
MAX_DARKENING_MAGNITUDE = 10.0
RADIUS_PER_MAGNITUDE = 3.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def darkening_factor(mean_magnitude: float) -> float:
    """Share of the base colour removed, 0 at magnitude 0 and 1 from 10 up.

    Negative, NaN and infinite magnitudes give 0.
    """
    if not math.isfinite(mean_magnitude) or mean_magnitude <= 0:
        return 0.0
    return min(mean_magnitude / MAX_DARKENING_MAGNITUDE, 1.0)


def color_for(mean_magnitude: float) -> RGB:
    factor = darkening_factor(mean_magnitude)
    red, green, blue = (_round_half_up(channel * (1 - factor)) for channel in BASE_COLOR)
    return (red, green, blue)


def to_css_rgb(rgb: RGB) -> str:
    return f"rgb({','.join(str(channel) for channel in rgb)})"


def visual_radius(mean_magnitude: float) -> float:
    if not math.isfinite(mean_magnitude) or mean_magnitude <= 0:
        return 0.0
    return mean_magnitude * RADIUS_PER_MAGNITUDE
