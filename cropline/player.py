"""Video player — decodes the cropped window of a video for preview.

Playback positions are *relative to the cropped start*: ``seek_to(0)``
shows the first frame of the crop window and ``frame_updated`` reports
frames counted from there.  The timeline adds the crop offset back when
it places the cursor.
"""

import logging
import time as _time
from typing import Optional

import cv2
from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QImage

from .coords import clamp
from .models import DEFAULT_FPS
from .utils import numpy_to_qimage

logger = logging.getLogger(__name__)


class VideoPlayer(QObject):
    """OpenCV-backed player with wall-clock timing.

    Implements the playback contract the timeline surface expects:
    ``seek_to``, ``play``, ``pause``, ``set_crop_start``,
    ``set_crop_duration`` and the ``frame_updated`` signal.
    """

    frame_updated = Signal(int)     # current frame, relative to crop start
    frame_ready = Signal(QImage)    # decoded frame for the preview
    playing_changed = Signal(bool)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._cap: Optional[cv2.VideoCapture] = None
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._advance_playback)
        self._fps: float = DEFAULT_FPS
        self._duration_ms: float = 0.0
        self._crop_start_ms: float = 0.0
        self._crop_duration_ms: float = 0.0  # 0 = to the end of the media
        self._pos_ms: float = 0.0            # relative to crop start
        self._current_frame: int = 0
        self._playing: bool = False
        # Wall-clock anchors for accurate playback speed
        self._play_start_wall: float = 0.0
        self._play_start_pos_ms: float = 0.0
        self._last_displayed_frame: int = -1

    # ── media ───────────────────────────────────────────────────────

    def load(self, path: str, fps: float = 0.0, duration_ms: float = 0.0) -> bool:
        """Open *path* for playback.  Returns False if it cannot be opened."""
        self.release()
        cap = cv2.VideoCapture(path)
        if not cap.isOpened():
            logger.error("Player could not open %s", path)
            return False
        self._cap = cap
        meta_fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        self._fps = fps if fps > 0 else (meta_fps if meta_fps > 0 else DEFAULT_FPS)
        if duration_ms > 0:
            self._duration_ms = duration_ms
        else:
            frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
            self._duration_ms = frames / self._fps * 1000.0
        self._crop_start_ms = 0.0
        self._crop_duration_ms = 0.0
        self.seek_to(0)
        return True

    def release(self) -> None:
        self.pause()
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    # ── crop window ─────────────────────────────────────────────────

    def set_crop_start(self, ms: float) -> None:
        """Move the start of the playable window and rewind to it."""
        self._crop_start_ms = clamp(ms, 0.0, self._duration_ms)
        self.seek_to(0)

    def set_crop_duration(self, ms: float) -> None:
        self._crop_duration_ms = max(0.0, ms)
        if self._pos_ms > self.window_ms:
            self.seek_to(self.window_ms)

    @property
    def window_ms(self) -> float:
        """Length of the playable window."""
        remaining = max(0.0, self._duration_ms - self._crop_start_ms)
        if self._crop_duration_ms > 0:
            return min(self._crop_duration_ms, remaining)
        return remaining

    # ── transport ───────────────────────────────────────────────────

    def seek_to(self, ms: float) -> None:
        """Jump to *ms* after the crop start and show that frame."""
        self._pos_ms = clamp(ms, 0.0, self.window_ms)
        if self._cap is not None and self._cap.isOpened():
            target_frame = self._abs_frame(self._pos_ms)
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, target_frame)
            ret, frame = self._cap.read()
            if ret:
                self._last_displayed_frame = target_frame
                self.frame_ready.emit(numpy_to_qimage(frame))
        if self._playing:
            self._play_start_wall = _time.perf_counter()
            self._play_start_pos_ms = self._pos_ms
        self._set_current_frame(self._rel_frame(self._pos_ms))

    def play(self) -> None:
        if self._cap is None or self._playing:
            return
        # At/near the end of the window, wrap back to its start
        if self._pos_ms >= self.window_ms - 100:
            self._pos_ms = 0.0
        target_frame = self._abs_frame(self._pos_ms)
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, target_frame)
        self._last_displayed_frame = max(target_frame - 1, -1)
        self._play_start_wall = _time.perf_counter()
        self._play_start_pos_ms = self._pos_ms
        self._playing = True
        self._timer.start(8)
        self.playing_changed.emit(True)

    def pause(self) -> None:
        was_playing = self._playing
        self._playing = False
        self._timer.stop()
        if was_playing:
            self.playing_changed.emit(False)

    def toggle(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def position_ms(self) -> float:
        return self._pos_ms

    @property
    def current_frame(self) -> int:
        return self._current_frame

    @property
    def fps(self) -> float:
        return self._fps

    # ── internals ───────────────────────────────────────────────────

    def _abs_frame(self, rel_ms: float) -> int:
        return int((self._crop_start_ms + rel_ms) / 1000.0 * self._fps)

    def _rel_frame(self, rel_ms: float) -> int:
        return int(rel_ms / 1000.0 * self._fps)

    def _set_current_frame(self, frame: int) -> None:
        if frame != self._current_frame:
            self._current_frame = frame
            self.frame_updated.emit(frame)

    def _advance_playback(self) -> None:
        if self._cap is None or not self._cap.isOpened():
            self.pause()
            return

        elapsed_s = _time.perf_counter() - self._play_start_wall
        target_ms = self._play_start_pos_ms + elapsed_s * 1000.0

        if target_ms >= self.window_ms:
            self._pos_ms = self.window_ms
            self._set_current_frame(self._rel_frame(self._pos_ms))
            self.pause()
            return

        target_frame = self._abs_frame(target_ms)
        self._pos_ms = target_ms
        if target_frame <= self._last_displayed_frame:
            self._set_current_frame(self._rel_frame(target_ms))
            return

        # Read sequentially; grab to catch up when behind
        frames_behind = target_frame - self._last_displayed_frame
        if frames_behind > 1:
            for _ in range(min(frames_behind - 1, 8)):
                if not self._cap.grab():
                    break

        ret, frame = self._cap.read()
        if ret:
            self._last_displayed_frame += frames_behind
            self.frame_ready.emit(numpy_to_qimage(frame))
        self._set_current_frame(self._rel_frame(target_ms))
