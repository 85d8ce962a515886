"""Preview widget — shows the player's current frame, letterboxed."""

from typing import Optional, Tuple

from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QImage, QPainter, QColor, QFont, QPen
from PySide6.QtWidgets import QWidget


class PreviewWidget(QWidget):
    """Central preview canvas for the cropped playback."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("PreviewWidget")
        self.setMinimumSize(480, 270)
        self._frame: Optional[QImage] = None

    def set_frame(self, frame: QImage) -> None:
        self._frame = frame
        self.update()

    def clear(self) -> None:
        self._frame = None
        self.update()

    def _canvas_rect(self) -> Tuple[float, float, float, float]:
        """Return (x, y, w, h) of the frame area, matching the source aspect."""
        W, H = float(self.width()), float(self.height())
        if self._frame is None or self._frame.width() <= 0 or self._frame.height() <= 0:
            return 0.0, 0.0, W, H
        target_aspect = self._frame.width() / self._frame.height()
        widget_aspect = W / max(H, 1)
        if widget_aspect > target_aspect:
            cw, ch = H * target_aspect, H
        else:
            cw, ch = W, W / target_aspect
        return (W - cw) / 2, (H - ch) / 2, cw, ch

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor("#000000"))

        if self._frame is None:
            font = QFont()
            font.setPixelSize(15)
            painter.setFont(font)
            painter.setPen(QPen(QColor("#9ca3af")))
            painter.drawText(
                self.rect(), Qt.AlignmentFlag.AlignCenter, "Open a video to start cropping"
            )
            painter.end()
            return

        x, y, w, h = self._canvas_rect()
        painter.drawImage(QRectF(x, y, w, h), self._frame)
        painter.end()
