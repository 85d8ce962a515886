"""Coordinate mapping between track pixels and media time.

All functions are pure.  A non-positive width or duration means the
timeline is not initialised yet; the mappings return ``0`` in that case
instead of raising.
"""


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into ``[lo, hi]`` (``lo`` wins if the range is empty)."""
    return max(lo, min(hi, value))


def px_to_ms(px: float, initial_width_px: float, total_duration_ms: float) -> float:
    """Time (ms) at pixel offset *px* on a track *initial_width_px* wide."""
    if initial_width_px <= 0:
        return 0.0
    return total_duration_ms * (px / initial_width_px)


def ms_to_px(ms: float, initial_width_px: float, total_duration_ms: float) -> float:
    """Pixel offset of time *ms* on a track *initial_width_px* wide."""
    if total_duration_ms <= 0:
        return 0.0
    return initial_width_px * (ms / total_duration_ms)


def px_to_ratio(px: float, width_px: float) -> float:
    """Fraction (0–1, unclamped) of *width_px* covered by *px*."""
    if width_px <= 0:
        return 0.0
    return px / width_px


def ratio_to_px(ratio: float, width_px: float) -> float:
    return ratio * width_px if width_px > 0 else 0.0
