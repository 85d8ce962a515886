"""Core data models for Cropline.

Defines the small value types passed between the crop-range engine,
the timeline surface and the media collaborators.  Geometry values
are plain floats in **track pixels**; times are in milliseconds.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class TimelineSpace:
    """Per-render context: how many pixels span how much media time."""
    pixel_width: float
    total_duration_ms: float
    fps: float = 30.0

    def __post_init__(self) -> None:
        if self.pixel_width <= 0:
            raise ValueError(f"pixel_width must be > 0, got {self.pixel_width}")
        if self.total_duration_ms < 0:
            raise ValueError(
                f"total_duration_ms must be >= 0, got {self.total_duration_ms}"
            )

    @property
    def ms_per_px(self) -> float:
        return self.total_duration_ms / self.pixel_width

    def tick_interval_ms(self, min_gap_px: float = 60.0) -> float:
        """Smallest round interval whose ticks sit at least *min_gap_px* apart."""
        needed = self.ms_per_px * min_gap_px
        for interval in TICK_INTERVALS_MS:
            if interval >= needed:
                return interval
        return TICK_INTERVALS_MS[-1]

    def ticks(self, min_gap_px: float = 60.0) -> List[Tuple[float, float]]:
        """(time_ms, x_px) pairs for the time ruler, starting at 0."""
        if self.total_duration_ms <= 0:
            return []
        interval = self.tick_interval_ms(min_gap_px)
        out = []
        t = 0.0
        while t <= self.total_duration_ms:
            out.append((t, t / self.ms_per_px))
            t += interval
        return out


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in track pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PlayheadState:
    """Snapshot of the playback position used to place the cursors."""
    current_frame: int
    total_duration_ms: float
    fps: float


@dataclass
class TimelineState:
    """Shared time state owned by the timeline surface.

    ``duration_ms`` is the committed selected duration (updated when a
    resize gesture ends), ``crop_time_ms`` the start of the cropped
    window that playback begins from.
    """

    total_duration_ms: float = 0.0
    duration_ms: float = 0.0
    crop_time_ms: float = 0.0
    fps: float = 30.0
    current_frame: int = 0
    max_duration_ms: float = 0.0  # 0 = unbounded

    def reset(self) -> None:
        self.total_duration_ms = 0.0
        self.duration_ms = 0.0
        self.crop_time_ms = 0.0
        self.current_frame = 0


@dataclass(frozen=True)
class MediaInfo:
    """Readiness signal from the media probe: the file is decodable and
    its duration is known."""
    path: str
    duration_ms: float
    fps: float
    width: int = 0
    height: int = 0
    frame_count: int = 0

    @property
    def total_frames(self) -> int:
        return int(self.duration_ms * self.fps / 1000) if self.fps > 0 else 0

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "durationMs": self.duration_ms,
            "fps": self.fps,
            "width": self.width,
            "height": self.height,
            "frameCount": self.frame_count,
        }


@dataclass
class Thumbnail:
    """One extracted frame image for the track background.

    ``image`` is a BGR array as decoded by OpenCV, or ``None`` when the
    frame could not be decoded (painted as a gap).
    """
    index: int
    timestamp_ms: float
    image: Optional[np.ndarray] = None

    @property
    def is_gap(self) -> bool:
        return self.image is None


DEFAULT_FPS = 30.0

# Candidate spacings for the time ruler, smallest first
TICK_INTERVALS_MS = (
    100.0, 250.0, 500.0, 1000.0, 2000.0, 5000.0, 10_000.0,
    30_000.0, 60_000.0, 300_000.0, 600_000.0, 1_800_000.0, 3_600_000.0,
)
