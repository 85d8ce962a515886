"""Timeline tunables and their persistence through ``QSettings``.

Only layout and extraction settings are stored; the crop selection
itself is never persisted.
"""

from dataclasses import dataclass, asdict, fields
from typing import Tuple

from .models import DEFAULT_FPS
from .thumbnails import (
    DEFAULT_THUMBNAIL_COUNT,
    DEFAULT_THUMBNAIL_SIZE,
    MIN_THUMBNAIL_WIDTH_PX,
)
from .interaction import HANDLE_GRAB_PX


@dataclass
class TimelineConfig:
    """Layout, colour and extraction settings for the timeline."""
    track_height_px: int = 80
    track_padding_px: int = 8          # each side of the track
    thumbnail_count: int = DEFAULT_THUMBNAIL_COUNT
    thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE
    min_thumbnail_width_px: int = MIN_THUMBNAIL_WIDTH_PX
    handle_grab_px: int = HANDLE_GRAB_PX
    default_fps: float = DEFAULT_FPS
    max_duration_ms: float = 0.0       # 0 = unbounded
    mask_color: Tuple[int, int, int, int] = (255, 0, 0, 178)
    track_color: Tuple[int, int, int] = (55, 65, 81)
    background_color: Tuple[int, int, int] = (31, 41, 55)

    def track_width_for(self, container_width: float) -> float:
        """Usable track width inside a container of *container_width*."""
        return max(0.0, container_width - 2 * self.track_padding_px)

    def to_dict(self) -> dict:
        d = asdict(self)
        for key in ("mask_color", "track_color", "background_color"):
            d[key] = list(d[key])
        return d

    @staticmethod
    def from_dict(d: dict) -> "TimelineConfig":
        """Build from a dict, ignoring unknown keys for forward compat."""
        known = {f.name for f in fields(TimelineConfig)}
        filtered = {k: v for k, v in d.items() if k in known}
        for key in ("mask_color", "track_color", "background_color"):
            if key in filtered:
                filtered[key] = tuple(filtered[key])
        return TimelineConfig(**filtered)


# QSettings keys for the values a user can change at runtime
_SETTINGS_KEYS = {
    "thumbnail_count": ("timeline/thumbnailCount", int),
    "thumbnail_size": ("timeline/thumbnailSize", int),
    "max_duration_ms": ("timeline/maxDurationMs", float),
}


def load_config(settings) -> TimelineConfig:
    """Read stored tunables from a ``QSettings``-like object."""
    config = TimelineConfig()
    for attr, (key, cast) in _SETTINGS_KEYS.items():
        value = settings.value(key, None)
        if value in (None, ""):
            continue
        try:
            setattr(config, attr, cast(value))
        except (TypeError, ValueError):
            continue
    return config


def save_config(config: TimelineConfig, settings) -> None:
    for attr, (key, _) in _SETTINGS_KEYS.items():
        settings.setValue(key, getattr(config, attr))
