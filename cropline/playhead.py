"""Playhead synchronisation between playback frames and track pixels.

Two read paths share ``total_frames``:

* the absolute playhead, from the player's current frame;
* the crop-relative playhead, from the cropped start time.

The player counts frames from the cropped start, so the cursor is drawn
at the *sum* of the two offsets.  That sum is a presentation convention
for this frame numbering, not a physical identity; keep both terms.
"""

import math

from .coords import clamp, px_to_ms
from .models import PlayheadState


def total_frames(total_duration_ms: float, fps: float) -> int:
    """Whole frames in the media: ``floor(ms * fps / 1000)``."""
    if total_duration_ms <= 0 or fps <= 0:
        return 0
    return int(math.floor(total_duration_ms * fps / 1000))


def player_duration_frames(duration_ms: float, fps: float) -> int:
    """Frame length of a playback window; never less than one frame."""
    return total_frames(duration_ms, fps) or 1


def absolute_playhead_px(current_frame: float, frames: int, track_width_px: float) -> float:
    if frames <= 0:
        return 0.0
    return (current_frame / frames) * track_width_px


def crop_playhead_px(
    crop_time_ms: float, fps: float, frames: int, track_width_px: float
) -> float:
    if frames <= 0:
        return 0.0
    crop_frames = crop_time_ms * fps / 1000
    return (crop_frames / frames) * track_width_px


def cursor_px(state: PlayheadState, crop_time_ms: float, track_width_px: float) -> float:
    """Combined cursor position: absolute + crop-relative offset."""
    frames = total_frames(state.total_duration_ms, state.fps)
    return (
        absolute_playhead_px(state.current_frame, frames, track_width_px)
        + crop_playhead_px(crop_time_ms, state.fps, frames, track_width_px)
    )


def click_to_time(click_px: float, initial_width_px: float, total_duration_ms: float) -> float:
    """Requested playback time for a click at *click_px* on the track."""
    ms = px_to_ms(click_px, initial_width_px, total_duration_ms)
    return clamp(ms, 0.0, max(0.0, total_duration_ms))
