"""Timeline widget — thumbnail track with a draggable crop window and playhead."""

from typing import Dict, List, Optional

from PySide6.QtCore import Qt, Signal, QRectF, QPointF
from PySide6.QtGui import (
    QPainter,
    QColor,
    QFont,
    QPen,
    QBrush,
    QImage,
    QMouseEvent,
)
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton

from ..config import TimelineConfig
from ..interaction import GestureKind
from ..models import Thumbnail
from ..surface import TimelineSurface
from ..utils import fmt_time as _fmt, fmt_precise as _fmt_precise, numpy_to_qimage


class _TimelineTrack(QWidget):
    """Custom-painted track: thumbnails, mask, time ruler, crop window and playhead.

    All geometry comes from the surface in track coordinates; this widget
    only offsets by the configured padding and paints.
    """

    HANDLE_LEN = 12  # length of the grip line drawn on each handle

    def __init__(self, surface: TimelineSurface, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._surface = surface
        cfg = surface.config
        self._pad = cfg.track_padding_px
        self.setMinimumHeight(cfg.track_height_px + 2 * cfg.track_padding_px)
        self.setMaximumHeight(cfg.track_height_px + 2 * cfg.track_padding_px)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMouseTracking(True)
        self._images: Dict[int, QImage] = {}

    def set_thumbnails(self, thumbnails: List[Thumbnail]) -> None:
        """Convert decoded frames once; gaps stay absent from the cache."""
        self._images = {
            t.index: numpy_to_qimage(t.image) for t in thumbnails if not t.is_gap
        }

    def clear_thumbnails(self) -> None:
        self._images = {}

    def _to_track(self, event: QMouseEvent) -> QPointF:
        pos = event.position()
        return QPointF(pos.x() - self._pad, pos.y() - self._pad)

    # ── painting ────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        cfg = self._surface.config
        painter.fillRect(0, 0, self.width(), self.height(), QColor(*cfg.background_color))

        painter.translate(self._pad, self._pad)
        track = self._surface.track_rect()
        if track.width <= 0:
            painter.end()
            return

        # track bg
        painter.setBrush(QBrush(QColor(*cfg.track_color)))
        painter.setPen(QPen(QColor("#6b7280"), 1))
        painter.drawRect(QRectF(*track.as_tuple()))

        self._draw_thumbnails(painter)

        if not self._surface.is_ready:
            painter.end()
            return

        # mask outside the crop window
        mask_color = QColor(*cfg.mask_color)
        for r in self._surface.mask_rects():
            painter.fillRect(QRectF(*r.as_tuple()), mask_color)

        self._draw_time_markers(painter)
        self._draw_crop_window(painter)
        self._draw_playhead(painter)
        painter.end()

    def _draw_thumbnails(self, painter: QPainter) -> None:
        layout = self._surface.thumbnail_layout
        if layout.cols <= 0:
            return
        for i, cell in enumerate(layout.cells()):
            rect = QRectF(*cell.as_tuple())
            image = self._images.get(i)
            if image is None:
                # Placeholder for a frame that failed to decode
                painter.fillRect(rect, QColor(75, 85, 99))
                painter.setPen(QPen(QColor("#9ca3af"), 1, Qt.PenStyle.DashLine))
                painter.drawRect(rect.adjusted(1, 1, -1, -1))
                continue
            painter.drawImage(rect, image)
            painter.setPen(QPen(QColor(59, 130, 246, 128), 1))
            painter.drawRect(rect)

    def _draw_time_markers(self, painter: QPainter) -> None:
        space = self._surface.space()
        if space is None:
            return
        h = self._surface.track_height
        font = QFont()
        font.setPixelSize(10)
        painter.setFont(font)
        painter.setPen(QPen(QColor("#d1d5db"), 1))
        for t, x in space.ticks():
            painter.drawLine(QPointF(x, h - 5), QPointF(x, h))
            if t > 0 and x < space.pixel_width - 30:
                painter.drawText(QPointF(x + 2, h - 6), _fmt(t))

    def _draw_crop_window(self, painter: QPainter) -> None:
        sel = self._surface.selection_rect()
        if sel is None:
            return
        rect = QRectF(*sel.as_tuple())
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(QColor("#ffffff"), 3))
        painter.drawRect(rect)

        dragging = self._surface.is_dragging
        mid_y = rect.center().y()
        half = self.HANDLE_LEN / 2
        for x in (rect.left(), rect.right()):
            # white outline, then the dark grip
            painter.setPen(QPen(QColor("#ffffff"), 6, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap))
            painter.drawLine(QPointF(x, mid_y - half), QPointF(x, mid_y + half))
            grip = QColor("#facc15") if dragging else QColor("#000000")
            painter.setPen(QPen(grip, 4, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap))
            painter.drawLine(QPointF(x, mid_y - half), QPointF(x, mid_y + half))

    def _draw_playhead(self, painter: QPainter) -> None:
        h = self._surface.track_height
        px = self._surface.cursor_px() + 2
        painter.setPen(QPen(QColor("#ef4444"), 1))
        painter.drawLine(QPointF(px, 0), QPointF(px, h))
        painter.setBrush(QBrush(QColor("#ef4444")))
        painter.setPen(QPen(QColor("#ffffff"), 2))
        painter.drawEllipse(QPointF(px, 0), 5, 5)

    # ── mouse events ────────────────────────────────────────────────

    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            p = self._to_track(event)
            self._surface.pointer_press(p.x(), p.y())

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        p = self._to_track(event)
        if self._surface.is_dragging:
            self._surface.pointer_move(p.x(), p.y())
            return
        kind = self._surface.hover_kind(p.x(), p.y())
        if kind in (GestureKind.RESIZE_LEFT, GestureKind.RESIZE_RIGHT):
            self.setCursor(Qt.CursorShape.SizeHorCursor)
        elif kind is GestureKind.MOVE:
            self.setCursor(Qt.CursorShape.OpenHandCursor)
        else:
            self.setCursor(Qt.CursorShape.PointingHandCursor)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._surface.pointer_release()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._surface.resize(self.width(), self.height() - 2 * self._pad)


class TimelineWidget(QWidget):
    """Full timeline: playback controls, time readout and the crop track."""

    play_pause_clicked = Signal()
    selection_changed = Signal(float, float)  # (start_ms, duration_ms)

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        player=None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("TimelineArea")
        self._last_selection = (-1.0, -1.0)

        self.surface = TimelineSurface(config, player, on_repaint=self._on_surface_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 8, 16, 6)
        layout.setSpacing(4)

        controls_row = QHBoxLayout()
        controls_row.setSpacing(6)
        controls_row.addStretch()

        self._play_btn = QPushButton("▶")
        self._play_btn.setObjectName("PlayBtn")
        self._play_btn.setToolTip("Play / Pause")
        self._play_btn.clicked.connect(self.play_pause_clicked)
        controls_row.addWidget(self._play_btn)

        controls_row.addSpacing(12)

        self._time_start = QLabel("0:00.00")
        self._time_start.setObjectName("TimeDisplay")
        self._time_start.setToolTip("Crop start")
        controls_row.addWidget(self._time_start)

        sep = QLabel(" + ")
        sep.setObjectName("TimeDisplayDim")
        controls_row.addWidget(sep)

        self._time_duration = QLabel("0:00.00")
        self._time_duration.setObjectName("TimeDisplay")
        self._time_duration.setToolTip("Selected duration")
        controls_row.addWidget(self._time_duration)

        sep2 = QLabel(" / ")
        sep2.setObjectName("TimeDisplayDim")
        controls_row.addWidget(sep2)

        self._time_total = QLabel("0:00")
        self._time_total.setObjectName("TimeDisplayDim")
        controls_row.addWidget(self._time_total)

        controls_row.addStretch()
        layout.addLayout(controls_row)

        self._track = _TimelineTrack(self.surface)
        layout.addWidget(self._track)

        hints_row = QHBoxLayout()
        hint = QLabel("Drag the window to move · Drag its edges to trim · Click the track to seek")
        hint.setObjectName("Muted")
        hints_row.addWidget(hint)
        hints_row.addStretch()
        layout.addLayout(hints_row)

    def set_thumbnails(self, thumbnails: List[Thumbnail]) -> None:
        self._track.set_thumbnails(thumbnails)
        self.surface.set_thumbnails(thumbnails)

    def set_playing(self, playing: bool) -> None:
        self._play_btn.setText("⏸" if playing else "▶")
        self._play_btn.setToolTip("Pause" if playing else "Play")

    def reset_track(self) -> None:
        self._track.clear_thumbnails()
        self._track.update()

    def dispose(self) -> None:
        self.surface.dispose()

    def _on_surface_changed(self) -> None:
        crop = self.surface.crop_range
        st = self.surface.state
        self._time_total.setText(_fmt(st.total_duration_ms))
        if crop is not None and crop.is_ready:
            start, duration = crop.start_time_ms, crop.selected_duration_ms
            self._time_start.setText(_fmt_precise(start))
            self._time_duration.setText(_fmt_precise(duration))
            if (start, duration) != self._last_selection:
                self._last_selection = (start, duration)
                self.selection_changed.emit(start, duration)
        self._track.update()
