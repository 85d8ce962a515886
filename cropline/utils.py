"""Shared utilities used by multiple modules."""

import cv2
import numpy as np
from PySide6.QtGui import QImage


def fmt_time(ms: float) -> str:
    """Format milliseconds as m:ss."""
    s = int(ms / 1000)
    m = s // 60
    return f"{m}:{s % 60:02d}"


def fmt_precise(ms: float) -> str:
    """Format milliseconds as m:ss.cc (centiseconds)."""
    total_s = max(0.0, ms) / 1000
    m = int(total_s) // 60
    s = int(total_s) % 60
    cs = int((total_s - int(total_s)) * 100)
    return f"{m}:{s:02d}.{cs:02d}"


def numpy_to_qimage(frame: np.ndarray) -> QImage:
    """Convert an OpenCV BGR frame to a detached ``QImage``."""
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    h, w, _ = rgb.shape
    return QImage(rgb.data, w, h, rgb.strides[0], QImage.Format.Format_RGB888).copy()
