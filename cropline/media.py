"""Media probing — the readiness signal for a newly opened video."""

import logging

import cv2

from .models import MediaInfo, DEFAULT_FPS

logger = logging.getLogger(__name__)


class MediaError(RuntimeError):
    """The video could not be opened or decoded."""


def probe_media(path: str) -> MediaInfo:
    """Open *path* with OpenCV and read its duration, fps and size.

    ``CAP_PROP_FRAME_COUNT`` can be missing for some containers; in that
    case the frames are counted by grabbing through the file.
    """
    cap = cv2.VideoCapture(path)
    try:
        if not cap.isOpened():
            raise MediaError(f"Cannot open video: {path}")

        fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        if fps <= 0 or fps != fps:  # NaN from some backends
            fps = DEFAULT_FPS
        frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)

        if frame_count <= 0:
            while cap.grab():
                frame_count += 1
        if frame_count <= 0:
            raise MediaError(f"Video has no frames: {path}")

        duration_ms = frame_count / fps * 1000.0
    finally:
        cap.release()

    logger.info(
        "probe_media: %s frames=%d fps=%.2f size=%dx%d duration_ms=%.0f",
        path, frame_count, fps, width, height, duration_ms,
    )
    return MediaInfo(
        path=path,
        duration_ms=duration_ms,
        fps=fps,
        width=width,
        height=height,
        frame_count=frame_count,
    )
