"""Main application window — preview, crop timeline and file handling."""

import logging
import os
from typing import List, Optional

logger = logging.getLogger(__name__)

from PySide6.QtCore import Qt, QSettings, QByteArray, QThread, Signal as CoreSignal
from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLabel,
    QFileDialog,
    QSpinBox,
)

from .config import load_config, save_config
from .media import MediaError, probe_media
from .models import MediaInfo, Thumbnail
from .player import VideoPlayer
from .theme import DARK_THEME
from .thumbnails import iter_thumbnails
from .utils import fmt_precise
from .widgets.preview_widget import PreviewWidget
from .widgets.timeline_widget import TimelineWidget

VIDEO_FILTER = "Videos (*.mp4 *.mov *.avi *.mkv *.webm);;All files (*)"


class _ThumbnailWorker(QThread):
    """Background thread that extracts the thumbnail strip.

    Decoding seeks through the whole file, so it runs off the GUI thread;
    the timeline is usable before the strip arrives.
    """
    done = CoreSignal(list)    # List[Thumbnail] on success
    failed = CoreSignal(str)   # error message on failure

    def __init__(self, path: str, count: int, size: int, parent=None) -> None:
        super().__init__(parent)
        self._path = path
        self._count = count
        self._size = size

    def run(self) -> None:  # noqa: D401
        thumbs: List[Thumbnail] = []
        try:
            for thumb in iter_thumbnails(self._path, self._count, self._size):
                if self.isInterruptionRequested():
                    return
                thumbs.append(thumb)
        except Exception as exc:
            self.failed.emit(str(exc))
            return
        self.done.emit(thumbs)


class MainWindow(QMainWindow):
    """Top-level window: open a video, drag the crop window, preview it.

    Persists window geometry, the last opened folder and the timeline
    tunables via ``QSettings``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Cropline")
        self.setMinimumSize(720, 480)
        self.resize(1100, 720)
        self.setStyleSheet(DARK_THEME)

        # ── persistent settings ─────────────────────────────────────
        self._settings = QSettings("Cropline", "Cropline")
        self._last_dir: str = self._settings.value("lastVideoDir", "")
        self._config = load_config(self._settings)
        self._restore_geometry()

        # ── core objects ────────────────────────────────────────────
        self._player = VideoPlayer(parent=self)
        self._media: Optional[MediaInfo] = None
        self._thumb_worker: Optional[_ThumbnailWorker] = None

        # ── layout ──────────────────────────────────────────────────
        central = QWidget()
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        root.addWidget(self._build_toolbar())

        self._preview = PreviewWidget()
        root.addWidget(self._preview, 1)

        self._timeline = TimelineWidget(self._config, self._player)
        root.addWidget(self._timeline)

        root.addWidget(self._build_status_bar())
        self.setCentralWidget(central)

        # ── wiring ──────────────────────────────────────────────────
        self._player.frame_ready.connect(self._preview.set_frame)
        self._player.playing_changed.connect(self._timeline.set_playing)
        self._timeline.play_pause_clicked.connect(self._player.toggle)
        self._timeline.selection_changed.connect(self._on_selection_changed)

    # ════════════════════════════════════════════════════════════════
    #  UI construction
    # ════════════════════════════════════════════════════════════════

    def _build_toolbar(self) -> QWidget:
        bar = QWidget()
        bar.setObjectName("ControlBar")
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(16, 6, 16, 6)
        layout.setSpacing(12)

        btn_open = QPushButton("📂  Open video…")
        btn_open.setObjectName("CtrlBtn")
        btn_open.clicked.connect(self._open_video)
        layout.addWidget(btn_open)

        layout.addStretch()

        label = QLabel("Max duration (s)")
        label.setObjectName("Muted")
        layout.addWidget(label)

        self._max_spin = QSpinBox()
        self._max_spin.setRange(0, 24 * 3600)
        self._max_spin.setSpecialValueText("Unlimited")
        self._max_spin.setValue(int(self._config.max_duration_ms / 1000))
        self._max_spin.valueChanged.connect(self._on_max_duration_changed)
        layout.addWidget(self._max_spin)

        return bar

    def _build_status_bar(self) -> QWidget:
        bar = QWidget()
        bar.setObjectName("StatusBar")
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(12, 0, 12, 0)
        self._status_text = QLabel("Ready")
        self._status_text.setObjectName("StatusLabel")
        layout.addWidget(self._status_text)
        layout.addStretch()
        hint = QLabel("Space  Play / Pause")
        hint.setObjectName("StatusLabel")
        layout.addWidget(hint)
        return bar

    # ════════════════════════════════════════════════════════════════
    #  Actions
    # ════════════════════════════════════════════════════════════════

    def _open_video(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", self._last_dir, VIDEO_FILTER,
        )
        if path:
            self.open_path(path)

    def open_path(self, path: str) -> bool:
        """Probe *path* and hand it to the timeline and player."""
        try:
            info = probe_media(path)
        except MediaError as exc:
            logger.error("Cannot open %s: %s", path, exc)
            self._status_text.setText(f"Open error: {exc}")
            return False

        self._last_dir = os.path.dirname(path)
        self._stop_thumbnail_worker()
        self._preview.clear()
        if not self._player.load(path, info.fps, info.duration_ms):
            self._status_text.setText(f"Open error: cannot decode {os.path.basename(path)}")
            return False
        self._media = info
        logger.debug("Opened media %s", info.to_dict())
        self._timeline.reset_track()
        self._timeline.surface.media_ready(info)
        self.setWindowTitle(f"Cropline — {os.path.basename(path)}")
        self._status_text.setText(f"Loaded {os.path.basename(path)}")

        self._thumb_worker = _ThumbnailWorker(
            path, self._config.thumbnail_count, self._config.thumbnail_size, parent=self,
        )
        self._thumb_worker.done.connect(self._on_thumbnails_done)
        self._thumb_worker.failed.connect(self._on_thumbnails_failed)
        self._thumb_worker.start()
        return True

    def _on_thumbnails_done(self, thumbs: list) -> None:
        self._timeline.set_thumbnails(thumbs)
        self._release_worker()

    def _on_thumbnails_failed(self, error: str) -> None:
        logger.warning("Thumbnail extraction failed: %s", error)
        self._status_text.setText(f"Thumbnails unavailable: {error}")
        self._release_worker()

    def _on_max_duration_changed(self, seconds: int) -> None:
        self._config.max_duration_ms = float(seconds * 1000)
        self._timeline.surface.set_max_duration_ms(self._config.max_duration_ms)
        save_config(self._config, self._settings)

    def _on_selection_changed(self, start_ms: float, duration_ms: float) -> None:
        self._status_text.setText(
            f"Selection {fmt_precise(start_ms)} – {fmt_precise(start_ms + duration_ms)}"
        )

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Space and self._media is not None:
            self._player.toggle()
            return
        if event.key() == Qt.Key.Key_O and event.modifiers() == Qt.KeyboardModifier.ControlModifier:
            self._open_video()
            return
        super().keyPressEvent(event)

    # ── cleanup ─────────────────────────────────────────────────────

    def _stop_thumbnail_worker(self) -> None:
        if self._thumb_worker is None:
            return
        self._thumb_worker.done.disconnect(self._on_thumbnails_done)
        self._thumb_worker.failed.disconnect(self._on_thumbnails_failed)
        self._thumb_worker.requestInterruption()
        self._thumb_worker.wait()
        self._release_worker()

    def _release_worker(self) -> None:
        if self._thumb_worker is not None:
            self._thumb_worker.deleteLater()
            self._thumb_worker = None

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Persist settings, then tear down the timeline and player."""
        self._settings.setValue("windowGeometry", self.saveGeometry())
        self._settings.setValue("lastVideoDir", self._last_dir)
        save_config(self._config, self._settings)
        self._settings.sync()

        self._stop_thumbnail_worker()
        self._timeline.dispose()
        self._player.release()
        event.accept()

    def _restore_geometry(self) -> None:
        """Restore window size/position from saved settings."""
        geom = self._settings.value("windowGeometry")
        if geom and isinstance(geom, QByteArray):
            self.restoreGeometry(geom)
