"""Thumbnail strip — frame extraction and track layout.

Extraction is a lazy generator so a caller (the background worker) can
stream results and stop early.  A frame that fails to decode is yielded
as a gap (``image=None``) instead of aborting the strip.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import cv2

from .media import MediaError
from .models import Rect, Thumbnail

logger = logging.getLogger(__name__)

DEFAULT_THUMBNAIL_COUNT = 16
DEFAULT_THUMBNAIL_SIZE = 120
MIN_THUMBNAIL_WIDTH_PX = 20


def thumbnail_timestamps(first_ms: float, last_ms: float, count: int) -> List[float]:
    """Evenly spaced timestamps: ``first + i * (last - first) / count``."""
    if count <= 0:
        return []
    step = (last_ms - first_ms) / count
    return [first_ms + i * step for i in range(count)]


def fit_thumbnail_size(display_w: int, display_h: int, size: int) -> Tuple[int, int]:
    """Scale so the larger side equals *size*, keeping the aspect ratio."""
    if display_w <= 0 or display_h <= 0:
        return size, size
    if display_w > display_h:
        return size, max(1, int(math.floor(size * display_h / display_w)))
    if display_h > display_w:
        return max(1, int(math.floor(size * display_w / display_h))), size
    return size, size


def iter_thumbnails(
    path: str,
    count: int = DEFAULT_THUMBNAIL_COUNT,
    size: int = DEFAULT_THUMBNAIL_SIZE,
) -> Iterator[Thumbnail]:
    """Yield *count* thumbnails of the video at *path*.

    Raises ``MediaError`` if the file cannot be opened at all; per-frame
    decode failures are yielded as gaps and logged.
    """
    cap = cv2.VideoCapture(path)
    try:
        if not cap.isOpened():
            raise MediaError(f"Cannot open video for thumbnails: {path}")
        fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        last_ms = frame_count / fps * 1000.0 if fps > 0 else 0.0
        tw, th = fit_thumbnail_size(
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0),
            size,
        )

        for i, ts in enumerate(thumbnail_timestamps(0.0, last_ms, count)):
            cap.set(cv2.CAP_PROP_POS_MSEC, ts)
            ok, frame = cap.read()
            if not ok or frame is None:
                logger.warning("Failed to generate thumbnail %d/%d", i + 1, count)
                yield Thumbnail(index=i, timestamp_ms=ts, image=None)
                continue
            image = cv2.resize(frame, (tw, th), interpolation=cv2.INTER_AREA)
            yield Thumbnail(index=i, timestamp_ms=ts, image=image)
    finally:
        cap.release()


@dataclass(frozen=True)
class ThumbnailLayout:
    """Single-row placement of thumbnails across the track."""
    cols: int
    thumb_width: float
    thumb_height: float

    @staticmethod
    def compute(
        count: int,
        track_width: float,
        track_height: float,
        min_thumb_width: float = MIN_THUMBNAIL_WIDTH_PX,
    ) -> "ThumbnailLayout":
        if count <= 0 or track_width <= 0 or min_thumb_width <= 0:
            return ThumbnailLayout(0, 0.0, 0.0)
        cols = min(count, int(track_width // min_thumb_width))
        if cols <= 0:
            return ThumbnailLayout(0, 0.0, 0.0)
        return ThumbnailLayout(cols, track_width / cols, track_height)

    def cells(self) -> List[Rect]:
        return [
            Rect(i * self.thumb_width, 0.0, self.thumb_width, self.thumb_height)
            for i in range(self.cols)
        ]
