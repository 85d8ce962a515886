"""Crop range model — the authoritative selection on the timeline track.

The selection is an ``(offset_px, width_px)`` window on a track that is
``initial_width_px`` wide.  Its start time and duration are *derived*
from those pixel fractions and the media's total duration on every
read; they are never stored, so they cannot drift from the geometry.

All constraint math lives in the pure ``*_transition`` functions below,
which map a :class:`CropGeometry` to a new one.  :class:`CropRange`
commits their results and notifies listeners.  Out-of-range input is
clamped, never rejected: a pointer gesture must always produce a
renderable state.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional

from .coords import clamp, px_to_ms, px_to_ratio

logger = logging.getLogger(__name__)

MIN_WIDTH_PX = 1.0
_EPS = 1e-9


@dataclass(frozen=True)
class CropGeometry:
    """Immutable selection geometry in track pixels."""
    offset_px: float
    width_px: float

    @property
    def right_px(self) -> float:
        return self.offset_px + self.width_px

    def is_close(self, other: "CropGeometry") -> bool:
        return (
            math.isclose(self.offset_px, other.offset_px, abs_tol=_EPS)
            and math.isclose(self.width_px, other.width_px, abs_tol=_EPS)
        )


@dataclass(frozen=True)
class CropBounds:
    """Limits a geometry must respect: the track width and the max width.

    ``max_width_px == 0`` means unbounded (the whole track).
    """
    track_width_px: float
    max_width_px: float = 0.0

    @property
    def effective_max_width_px(self) -> float:
        m = self.max_width_px if self.max_width_px > 0 else self.track_width_px
        return min(m, self.track_width_px)

    @property
    def min_width_px(self) -> float:
        return min(MIN_WIDTH_PX, self.track_width_px)


class Transition(NamedTuple):
    geometry: CropGeometry
    snapped_left: bool = False  # left edge was pinned to the track start


# ── pure transitions ────────────────────────────────────────────────


def clamp_width(width_px: float, bounds: CropBounds) -> float:
    return clamp(width_px, bounds.min_width_px, bounds.effective_max_width_px)


def constrain_geometry(geom: CropGeometry, bounds: CropBounds) -> CropGeometry:
    """Force *geom* inside *bounds*: width first, then offset."""
    width = clamp_width(geom.width_px, bounds)
    offset = clamp(geom.offset_px, 0.0, max(0.0, bounds.track_width_px - width))
    return CropGeometry(offset, width)


def move_transition(geom: CropGeometry, bounds: CropBounds, delta_px: float) -> Transition:
    """Shift the window by *delta_px*, keeping it on the track."""
    track = bounds.track_width_px
    width = geom.width_px
    offset = geom.offset_px + delta_px
    if offset < 0:
        offset = 0.0
    if width >= track:
        # Spans the whole track: nowhere to move
        offset = 0.0
    if offset + width > track:
        offset = max(0.0, track - width)
    return Transition(CropGeometry(offset, width))


def resize_right_transition(
    geom: CropGeometry, bounds: CropBounds, new_width_px: float
) -> Transition:
    """Move the right edge; the left edge (offset) is the anchor."""
    hi = min(bounds.effective_max_width_px, bounds.track_width_px - geom.offset_px)
    width = clamp(new_width_px, bounds.min_width_px, hi)
    return Transition(CropGeometry(geom.offset_px, width))


def resize_left_transition(
    geom: CropGeometry, bounds: CropBounds, new_width_px: float
) -> Transition:
    """Move the left edge; the right edge is the anchor.

    If the left edge would cross the track start, the offset is pinned
    to ``0`` first and the width is then derived from that pinned
    position (capped by the max width), not from the raw request.
    """
    width = clamp_width(new_width_px, bounds)
    offset = geom.offset_px + (geom.width_px - width)
    if offset < 0:
        pinned = min(geom.right_px, bounds.effective_max_width_px)
        pinned = max(pinned, bounds.min_width_px)
        return Transition(CropGeometry(0.0, pinned), snapped_left=True)
    return Transition(CropGeometry(offset, width))


# ── model ───────────────────────────────────────────────────────────


class CropRange:
    """Mutable crop window with invariant enforcement and time listeners.

    Listeners:

    * ``on_crop_time_changed(ms)`` — the start time moved.
    * ``on_duration_changed(ms)`` — a committed selected duration
      (end of a resize gesture, resync, programmatic edit).
    * ``on_trim_to_start()`` — the left handle snapped to the track
      start; playback should seek to ``0``.

    Listeners run only after the new geometry is fully clamped and
    stored.  A listener that tries to mutate the range is refused.
    """

    def __init__(
        self,
        total_duration_ms: float,
        max_duration_ms: float = 0.0,
        initial_width_px: float = 0.0,
        offset_px: float = 0.0,
        width_px: float = 0.0,
        max_width_px: float = 0.0,
        on_crop_time_changed: Optional[Callable[[float], None]] = None,
        on_duration_changed: Optional[Callable[[float], None]] = None,
        on_trim_to_start: Optional[Callable[[], None]] = None,
    ) -> None:
        self.total_duration_ms: float = max(0.0, total_duration_ms)
        self.max_duration_ms: float = max(0.0, max_duration_ms)
        self.initial_width_px: float = max(0.0, initial_width_px)
        self.max_width_px: float = max(0.0, max_width_px)
        self.offset_px: float = offset_px
        self.width_px: float = width_px

        self._on_crop_time_changed = on_crop_time_changed
        self._on_duration_changed = on_duration_changed
        self._on_trim_to_start = on_trim_to_start
        self._notifying: bool = False

        if self.is_ready:
            geom = constrain_geometry(self.geometry, self.bounds)
            self.offset_px, self.width_px = geom.offset_px, geom.width_px

    # ── derived values ──────────────────────────────────────────────

    @property
    def is_ready(self) -> bool:
        return self.initial_width_px > 0

    @property
    def geometry(self) -> CropGeometry:
        return CropGeometry(self.offset_px, self.width_px)

    @property
    def bounds(self) -> CropBounds:
        return CropBounds(self.initial_width_px, self.max_width_px)

    @property
    def effective_max_width_px(self) -> float:
        return self.bounds.effective_max_width_px

    @property
    def right_px(self) -> float:
        return self.offset_px + self.width_px

    @property
    def start_time_ms(self) -> float:
        return px_to_ms(self.offset_px, self.initial_width_px, self.total_duration_ms)

    @property
    def selected_duration_ms(self) -> float:
        return px_to_ms(self.width_px, self.initial_width_px, self.total_duration_ms)

    @property
    def end_time_ms(self) -> float:
        return self.start_time_ms + self.selected_duration_ms

    def max_width_for(self, initial_width_px: float) -> float:
        """Pixel width equivalent of ``max_duration_ms`` on a track of
        *initial_width_px*; ``0`` when unbounded."""
        if (
            self.max_duration_ms <= 0
            or self.total_duration_ms <= 0
            or self.max_duration_ms >= self.total_duration_ms
        ):
            return 0.0
        return initial_width_px * (self.max_duration_ms / self.total_duration_ms)

    # ── gesture-driven operations ───────────────────────────────────

    def move_by(self, delta_px: float) -> bool:
        """Drag the whole window by *delta_px*."""
        if not self.is_ready:
            return False
        return self.apply(move_transition(self.geometry, self.bounds, delta_px))

    def resize_from_right_edge(self, new_width_px: float) -> bool:
        if not self.is_ready:
            return False
        return self.apply(
            resize_right_transition(self.geometry, self.bounds, new_width_px)
        )

    def resize_from_left_edge(self, new_width_px: float) -> bool:
        if not self.is_ready:
            return False
        return self.apply(
            resize_left_transition(self.geometry, self.bounds, new_width_px)
        )

    def apply(self, transition: Transition) -> bool:
        """Commit a transition computed against the current geometry."""
        return self._commit(transition, commit_duration=False)

    def commit_duration(self) -> None:
        """Publish the current selected duration as a committed edit."""
        if not self.is_ready or self._notifying:
            return
        self._notifying = True
        try:
            if self._on_duration_changed:
                self._on_duration_changed(self.selected_duration_ms)
        finally:
            self._notifying = False

    # ── sync / programmatic operations ──────────────────────────────

    def resync(
        self, new_initial_width_px: float, new_max_width_px: Optional[float] = None
    ) -> bool:
        """Rescale to a new track width, preserving relative position and size.

        The first sync (no previous width) spans the window from the
        track start to the max width, or over the whole track when
        unbounded.
        """
        if new_initial_width_px <= 0:
            return False
        if self._notifying:
            logger.debug("resync refused during listener callback")
            return False

        if new_max_width_px is None:
            new_max_width_px = self.max_width_for(new_initial_width_px)
        new_max_width_px = max(0.0, new_max_width_px)

        old_initial = self.initial_width_px
        if old_initial > 0:
            scale = new_initial_width_px / old_initial
            offset = self.offset_px * scale
            width = self.width_px * scale
        else:
            offset = 0.0
            width = new_max_width_px if new_max_width_px > 0 else new_initial_width_px

        old_start = self.start_time_ms
        old_duration = self.selected_duration_ms
        old_geom = self.geometry

        self.initial_width_px = new_initial_width_px
        self.max_width_px = new_max_width_px
        geom = constrain_geometry(CropGeometry(offset, width), self.bounds)
        self.offset_px, self.width_px = geom.offset_px, geom.width_px

        if old_initial != new_initial_width_px:
            logger.debug(
                "resync: width %.1f -> %.1f px, max %.1f px, window %.1f+%.1f px",
                old_initial, new_initial_width_px, new_max_width_px,
                self.offset_px, self.width_px,
            )
        self._notify(old_start, old_duration, trim=False, commit_duration=True)
        return not old_geom.is_close(geom)

    def set_max_duration_ms(self, max_duration_ms: float) -> bool:
        """Change the maximum selectable duration (``0`` = unbounded)."""
        self.max_duration_ms = max(0.0, max_duration_ms)
        if not self.is_ready:
            return False
        return self.resync(self.initial_width_px)

    def constrain(self) -> bool:
        """Re-apply every clamp to the current state."""
        if not self.is_ready:
            return False
        return self._commit(
            Transition(constrain_geometry(self.geometry, self.bounds)),
            commit_duration=True,
        )

    def percentage_bounds(self, canvas_width: float) -> tuple:
        """Return ``(offset_pct, width_pct)`` of *canvas_width*, each in [0, 100]."""
        if canvas_width <= 0:
            return 0.0, 0.0
        offset_pct = clamp(px_to_ratio(self.offset_px, canvas_width) * 100, 0.0, 100.0)
        width_pct = clamp(px_to_ratio(self.width_px, canvas_width) * 100, 0.0, 100.0)
        return offset_pct, width_pct

    def set_by_percentage(
        self,
        offset_pct: Optional[float] = None,
        width_pct: Optional[float] = None,
        canvas_width: float = 0.0,
    ) -> bool:
        """Programmatic inverse of :meth:`percentage_bounds`."""
        if not self.is_ready or canvas_width <= 0:
            return False
        width = self.width_px
        if width_pct is not None:
            width = clamp(width_pct, 0.0, 100.0) / 100.0 * canvas_width
        offset = self.offset_px
        if offset_pct is not None:
            offset = clamp(offset_pct, 0.0, 100.0) / 100.0 * canvas_width
        geom = constrain_geometry(CropGeometry(offset, width), self.bounds)
        return self._commit(Transition(geom), commit_duration=True)

    # ── internals ───────────────────────────────────────────────────

    def _commit(self, transition: Transition, commit_duration: bool) -> bool:
        if self._notifying:
            logger.debug("Crop range mutation refused during listener callback")
            return False
        old_geom = self.geometry
        old_start = self.start_time_ms
        old_duration = self.selected_duration_ms
        new_geom = transition.geometry

        self.offset_px, self.width_px = new_geom.offset_px, new_geom.width_px

        trim = transition.snapped_left and old_geom.offset_px > 0
        self._notify(old_start, old_duration, trim=trim, commit_duration=commit_duration)
        return not old_geom.is_close(new_geom)

    def _notify(
        self, old_start: float, old_duration: float, trim: bool, commit_duration: bool
    ) -> None:
        self._notifying = True
        try:
            if self._on_crop_time_changed and not _close(old_start, self.start_time_ms):
                self._on_crop_time_changed(self.start_time_ms)
            if trim and self._on_trim_to_start:
                self._on_trim_to_start()
            if (
                commit_duration
                and self._on_duration_changed
                and not _close(old_duration, self.selected_duration_ms)
            ):
                self._on_duration_changed(self.selected_duration_ms)
        finally:
            self._notifying = False


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, abs_tol=_EPS)
