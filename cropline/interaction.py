"""Pointer interaction for the crop window: hit testing and gestures.

A gesture is one of three kinds.  Each kind maps to a pure transition
``(geometry, bounds, delta_px) -> Transition`` where *delta_px* is how far
the grabbed feature (body, left edge or right edge) must travel to sit
under the pointer again.  :class:`GestureController` runs the
``Idle -> Dragging{kind} -> Idle`` state machine on top of a
:class:`~cropline.crop_range.CropRange`.
"""

import enum
import logging
from typing import Callable, Dict, Optional

from .crop_range import (
    CropBounds,
    CropGeometry,
    CropRange,
    Transition,
    move_transition,
    resize_left_transition,
    resize_right_transition,
)

logger = logging.getLogger(__name__)

HANDLE_GRAB_PX = 8  # pixel tolerance for grabbing an edge handle
MIN_TRAVEL_PX = 1e-6  # pointer travel below this is not a change


class GestureKind(enum.Enum):
    MOVE = "move"
    RESIZE_LEFT = "resize_left"
    RESIZE_RIGHT = "resize_right"

    @property
    def is_resize(self) -> bool:
        return self is not GestureKind.MOVE


def _drag_body(geom: CropGeometry, bounds: CropBounds, delta_px: float) -> Transition:
    return move_transition(geom, bounds, delta_px)


def _drag_left_edge(geom: CropGeometry, bounds: CropBounds, delta_px: float) -> Transition:
    # Left edge moving right narrows the window
    return resize_left_transition(geom, bounds, geom.width_px - delta_px)


def _drag_right_edge(geom: CropGeometry, bounds: CropBounds, delta_px: float) -> Transition:
    return resize_right_transition(geom, bounds, geom.width_px + delta_px)


TRANSITIONS: Dict[GestureKind, Callable[[CropGeometry, CropBounds, float], Transition]] = {
    GestureKind.MOVE: _drag_body,
    GestureKind.RESIZE_LEFT: _drag_left_edge,
    GestureKind.RESIZE_RIGHT: _drag_right_edge,
}


def grabbed_feature_px(kind: GestureKind, geom: CropGeometry) -> float:
    """X position of the part of the window a gesture of *kind* holds."""
    if kind is GestureKind.RESIZE_RIGHT:
        return geom.right_px
    return geom.offset_px


def hit_test(
    geom: CropGeometry,
    x: float,
    y: float,
    track_height: float,
    grab_px: float = HANDLE_GRAB_PX,
) -> Optional[GestureKind]:
    """Which gesture a press at ``(x, y)`` starts, or ``None``.

    Edge handles take priority over the body so a narrow window can
    still be resized.  When both handles are within reach, the nearer
    one wins.
    """
    if y < 0 or y > track_height:
        return None
    left_dist = abs(x - geom.offset_px)
    right_dist = abs(x - geom.right_px)
    if left_dist <= grab_px or right_dist <= grab_px:
        if left_dist < right_dist:
            return GestureKind.RESIZE_LEFT
        if right_dist < left_dist:
            return GestureKind.RESIZE_RIGHT
        # Equidistant (zero-width window): grow to the pointer's side
        return GestureKind.RESIZE_RIGHT if x >= geom.right_px else GestureKind.RESIZE_LEFT
    if geom.offset_px < x < geom.right_px:
        return GestureKind.MOVE
    return None


class GestureController:
    """Drives one crop window through pointer gestures.

    ``begin`` records where the grabbed feature was and where the pointer
    was pressed.  Every ``update`` places the feature at
    ``feature_start + (x - press_x)``, so clamping at a boundary never
    loses the pointer relationship: dragging back out of the clamp
    resumes exactly where the pointer is.
    """

    def __init__(self, crop: CropRange) -> None:
        self._crop = crop
        self._kind: Optional[GestureKind] = None
        self._press_x: float = 0.0
        self._feature_start_px: float = 0.0
        self._moved: bool = False

    @property
    def kind(self) -> Optional[GestureKind]:
        return self._kind

    @property
    def is_dragging(self) -> bool:
        return self._kind is not None

    def begin(self, kind: GestureKind, x: float) -> None:
        if self._kind is not None:
            self.cancel()
        self._kind = kind
        self._press_x = x
        self._feature_start_px = grabbed_feature_px(kind, self._crop.geometry)
        self._moved = False

    def update(self, x: float) -> bool:
        """Apply the pointer at *x*.  Returns True if the geometry changed."""
        if self._kind is None or not self._crop.is_ready:
            return False
        target = self._feature_start_px + (x - self._press_x)
        geom = self._crop.geometry
        delta = target - grabbed_feature_px(self._kind, geom)
        if abs(delta) < MIN_TRAVEL_PX:
            return False
        transition = TRANSITIONS[self._kind](geom, self._crop.bounds, delta)
        changed = self._crop.apply(transition)
        self._moved = self._moved or changed
        return changed

    def end(self) -> Optional[GestureKind]:
        """Finish the gesture.  A resize publishes the committed duration."""
        kind = self._kind
        if kind is None:
            return None
        if kind.is_resize and self._moved:
            self._crop.commit_duration()
        logger.debug(
            "Gesture %s ended: %.1f+%.1f px", kind.value,
            self._crop.offset_px, self._crop.width_px,
        )
        self._reset()
        return kind

    def cancel(self) -> None:
        """Drop the gesture without touching the crop range."""
        self._reset()

    def rescale(self, factor: float) -> None:
        """Rebase an in-flight gesture after the track was rescaled."""
        if self._kind is None or factor <= 0:
            return
        self._press_x *= factor
        self._feature_start_px *= factor

    def _reset(self) -> None:
        self._kind = None
        self._press_x = 0.0
        self._feature_start_px = 0.0
        self._moved = False
