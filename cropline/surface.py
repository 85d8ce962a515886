"""Timeline surface — owns the crop window and everything derived from it.

The surface is the single owner of the :class:`CropRange`, the gesture
state machine, the shared :class:`TimelineState` and the thumbnail
layout.  Views call in with pointer and resize events in *track*
coordinates and read back rectangles and cursor positions to paint;
they never reach the model directly.

The playback collaborator is duck-typed: anything with ``seek_to``,
``set_crop_start``, ``set_crop_duration`` and a ``frame_updated`` signal
(``connect``/``disconnect``) works, which keeps this module free of Qt.
"""

import logging
from typing import Callable, List, Optional

from .config import TimelineConfig
from .crop_range import CropRange
from .interaction import GestureController, GestureKind, hit_test
from .mask import mask_rects
from .models import (
    MediaInfo,
    PlayheadState,
    Rect,
    Thumbnail,
    TimelineSpace,
    TimelineState,
)
from .playhead import click_to_time, cursor_px
from .thumbnails import ThumbnailLayout

logger = logging.getLogger(__name__)


class TimelineSurface:
    """Composes the crop engine, mask, playhead and thumbnail layout."""

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        player=None,
        on_repaint: Optional[Callable[[], None]] = None,
    ) -> None:
        self.config = config or TimelineConfig()
        self.state = TimelineState(
            fps=self.config.default_fps,
            max_duration_ms=self.config.max_duration_ms,
        )
        self._on_repaint = on_repaint
        self._player = None
        self._crop: Optional[CropRange] = None
        self._gesture: Optional[GestureController] = None
        self._media: Optional[MediaInfo] = None
        self._track_width: float = 0.0
        self._track_height: float = float(self.config.track_height_px)
        self._thumbnails: List[Thumbnail] = []
        self.thumbnail_layout = ThumbnailLayout(0, 0.0, 0.0)
        self._disposed: bool = False
        if player is not None:
            self.set_player(player)

    # ── lifecycle ───────────────────────────────────────────────────

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_ready(self) -> bool:
        return self._crop is not None and self._crop.is_ready

    @property
    def crop_range(self) -> Optional[CropRange]:
        return self._crop

    @property
    def media(self) -> Optional[MediaInfo]:
        return self._media

    @property
    def track_width(self) -> float:
        return self._track_width

    @property
    def track_height(self) -> float:
        return self._track_height

    @property
    def thumbnails(self) -> List[Thumbnail]:
        return self._thumbnails

    @property
    def is_dragging(self) -> bool:
        return self._gesture is not None and self._gesture.is_dragging

    def set_player(self, player) -> None:
        """Attach the playback collaborator and subscribe to its frames."""
        if self._disposed:
            return
        self._unsubscribe()
        self._player = player
        if player is not None:
            player.frame_updated.connect(self.on_frame_update)

    def media_ready(self, info: MediaInfo) -> None:
        """Create a fresh crop window for newly opened media."""
        if self._disposed:
            return
        if self._gesture is not None:
            self._gesture.cancel()

        self._media = info
        self._thumbnails = []
        self._relayout_thumbnails()

        st = self.state
        st.reset()
        st.total_duration_ms = max(0.0, info.duration_ms)
        st.fps = info.fps if info.fps > 0 else self.config.default_fps
        if 0 < st.max_duration_ms < st.total_duration_ms:
            st.duration_ms = st.max_duration_ms
        else:
            st.duration_ms = st.total_duration_ms

        self._crop = CropRange(
            total_duration_ms=st.total_duration_ms,
            max_duration_ms=st.max_duration_ms,
            on_crop_time_changed=self._on_crop_time_changed,
            on_duration_changed=self._on_duration_changed,
            on_trim_to_start=self._on_trim_to_start,
        )
        self._gesture = GestureController(self._crop)
        if self._track_width > 0:
            self._crop.resync(self._track_width)

        logger.info(
            "Media ready: %.0f ms @ %.2f fps, max %.0f ms",
            st.total_duration_ms, st.fps, st.max_duration_ms,
        )
        if self._player is not None:
            self._player.set_crop_start(st.crop_time_ms)
            self._player.set_crop_duration(st.duration_ms)
        self._request_repaint()

    def resize(self, container_width: float, container_height: Optional[float] = None) -> bool:
        """Container resized: resync the window, preserving percentages."""
        if self._disposed:
            return False
        new_width = self.config.track_width_for(container_width)
        if container_height is not None and container_height > 0:
            self._track_height = min(float(self.config.track_height_px), container_height)
        old_width = self._track_width
        self._track_width = new_width
        changed = False
        if self._crop is not None and new_width > 0:
            if self._gesture is not None and old_width > 0:
                self._gesture.rescale(new_width / old_width)
            changed = self._crop.resync(new_width)
        self._relayout_thumbnails()
        self._request_repaint()
        return changed

    def set_thumbnails(self, thumbnails: List[Thumbnail]) -> None:
        """Accept the (late) thumbnail strip and re-derive the layout."""
        if self._disposed:
            return
        self._thumbnails = list(thumbnails)
        gaps = sum(1 for t in self._thumbnails if t.is_gap)
        if gaps:
            logger.warning("%d of %d thumbnails missing", gaps, len(self._thumbnails))
        self._relayout_thumbnails()
        if self._crop is not None and self._track_width > 0:
            self._crop.resync(self._track_width)
        self._request_repaint()

    def dispose(self) -> None:
        """Tear down: drop the gesture, unsubscribe, release the model."""
        if self._disposed:
            return
        if self._gesture is not None:
            self._gesture.cancel()
        self._unsubscribe()
        self._player = None
        self._gesture = None
        self._crop = None
        self._thumbnails = []
        self._on_repaint = None
        self._disposed = True
        logger.info("Timeline surface disposed")

    # ── pointer events (track coordinates) ──────────────────────────

    def hover_kind(self, x: float, y: float) -> Optional[GestureKind]:
        if not self.is_ready:
            return None
        return hit_test(
            self._crop.geometry, x, y, self._track_height, self.config.handle_grab_px
        )

    def pointer_press(self, x: float, y: float) -> bool:
        """Start a gesture on the window, or seek when clicking elsewhere."""
        if self._disposed or not self.is_ready:
            return False
        kind = self.hover_kind(x, y)
        if kind is not None:
            self._gesture.begin(kind, x)
            self._request_repaint()
            return True
        if 0 <= y <= self._track_height:
            t = click_to_time(x, self._crop.initial_width_px, self.state.total_duration_ms)
            self._push_crop_time(t)
            self._request_repaint()
            return True
        return False

    def pointer_move(self, x: float, y: float) -> bool:
        if self._disposed or self._gesture is None or not self._gesture.is_dragging:
            return False
        changed = self._gesture.update(x)
        if changed:
            self._request_repaint()
        return changed

    def pointer_release(self) -> bool:
        if self._disposed or self._gesture is None:
            return False
        kind = self._gesture.end()
        if kind is None:
            return False
        self._request_repaint()
        return True

    # ── programmatic edits ──────────────────────────────────────────

    def set_max_duration_ms(self, max_duration_ms: float) -> bool:
        if self._disposed:
            return False
        self.state.max_duration_ms = max(0.0, max_duration_ms)
        if self._crop is None:
            return False
        changed = self._crop.set_max_duration_ms(self.state.max_duration_ms)
        self._request_repaint()
        return changed

    def set_selection_percentages(
        self, offset_pct: Optional[float] = None, width_pct: Optional[float] = None
    ) -> bool:
        if self._disposed or not self.is_ready:
            return False
        changed = self._crop.set_by_percentage(offset_pct, width_pct, self._track_width)
        if changed:
            self._request_repaint()
        return changed

    def selection_percentages(self) -> tuple:
        if not self.is_ready:
            return 0.0, 0.0
        return self._crop.percentage_bounds(self._track_width)

    # ── playback collaborator ───────────────────────────────────────

    def on_frame_update(self, frame: int) -> None:
        """``frameupdate`` subscriber: move the playhead."""
        if self._disposed:
            return
        self.state.current_frame = int(frame)
        self._request_repaint()

    # ── read model for painting ─────────────────────────────────────

    def space(self) -> Optional[TimelineSpace]:
        if self._track_width <= 0:
            return None
        return TimelineSpace(self._track_width, self.state.total_duration_ms, self.state.fps)

    def track_rect(self) -> Rect:
        return Rect(0.0, 0.0, self._track_width, self._track_height)

    def selection_rect(self) -> Optional[Rect]:
        if not self.is_ready:
            return None
        return Rect(self._crop.offset_px, 0.0, self._crop.width_px, self._track_height)

    def mask_rects(self) -> List[Rect]:
        selection = self.selection_rect()
        if selection is None:
            return []
        return mask_rects(self.track_rect(), selection)

    def playhead_state(self) -> PlayheadState:
        return PlayheadState(
            current_frame=self.state.current_frame,
            total_duration_ms=self.state.total_duration_ms,
            fps=self.state.fps,
        )

    def cursor_px(self) -> float:
        if not self.is_ready:
            return 0.0
        return cursor_px(self.playhead_state(), self.state.crop_time_ms, self._track_width)

    # ── internals ───────────────────────────────────────────────────

    def _on_crop_time_changed(self, ms: float) -> None:
        self._push_crop_time(ms)

    def _on_duration_changed(self, ms: float) -> None:
        self.state.duration_ms = ms
        if self._player is not None:
            self._player.set_crop_duration(ms)

    def _on_trim_to_start(self) -> None:
        if self._player is not None:
            self._player.seek_to(0)

    def _push_crop_time(self, ms: float) -> None:
        self.state.crop_time_ms = ms
        if self._player is not None:
            self._player.set_crop_start(ms)

    def _relayout_thumbnails(self) -> None:
        self.thumbnail_layout = ThumbnailLayout.compute(
            len(self._thumbnails),
            self._track_width,
            self._track_height,
            self.config.min_thumbnail_width_px,
        )

    def _unsubscribe(self) -> None:
        if self._player is None:
            return
        try:
            self._player.frame_updated.disconnect(self.on_frame_update)
        except (RuntimeError, TypeError) as exc:
            logger.debug("frame_updated already disconnected: %s", exc)

    def _request_repaint(self) -> None:
        if self._on_repaint is not None:
            self._on_repaint()
