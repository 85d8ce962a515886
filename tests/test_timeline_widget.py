"""Tests for cropline.widgets.timeline_widget — headless painting and readouts."""

import pytest

from cropline.config import TimelineConfig
from cropline.widgets.timeline_widget import TimelineWidget


@pytest.fixture
def widget(qapp, player, media_info) -> TimelineWidget:
    w = TimelineWidget(TimelineConfig(max_duration_ms=4000), player)
    w.surface.media_ready(media_info)
    w._track.resize(416, 96)
    w.surface.resize(416)
    yield w
    w.dispose()


def test_paints_ready_track(widget: TimelineWidget) -> None:
    assert widget.surface.space() is not None
    image = widget._track.grab()
    assert not image.isNull()


def test_selection_changed_reports_window(widget: TimelineWidget) -> None:
    seen: list = []
    widget.selection_changed.connect(lambda start, duration: seen.append((start, duration)))
    assert widget.surface.crop_range.move_by(40) is True
    widget._on_surface_changed()
    assert seen
    start, duration = seen[-1]
    assert start == pytest.approx(widget.surface.crop_range.start_time_ms)
    assert duration == pytest.approx(widget.surface.crop_range.selected_duration_ms)
