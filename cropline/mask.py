"""Mask overlay — the dimmed regions of the track outside the crop window."""

from typing import List

from .models import Rect


def mask_rects(track: Rect, selection: Rect) -> List[Rect]:
    """Return the rectangles covering *track* minus *selection*.

    Emits up to four rectangles in paint order (top, bottom, left,
    right); only those with strictly positive width and height.  In the
    single-row timeline the selection spans the full track height, so
    only the left and right pieces appear.
    """
    # Clip the selection to the track so a spill never yields negative areas
    sel_x = max(track.x, min(selection.x, track.right))
    sel_y = max(track.y, min(selection.y, track.bottom))
    sel_r = max(sel_x, min(selection.right, track.right))
    sel_b = max(sel_y, min(selection.bottom, track.bottom))

    candidates = [
        Rect(track.x, track.y, track.width, sel_y - track.y),          # top
        Rect(track.x, sel_b, track.width, track.bottom - sel_b),       # bottom
        Rect(track.x, sel_y, sel_x - track.x, sel_b - sel_y),          # left
        Rect(sel_r, sel_y, track.right - sel_r, sel_b - sel_y),        # right
    ]
    return [r for r in candidates if r.width > 0 and r.height > 0]
