"""Tests for cropline.playhead — frame/pixel synchronisation."""

import pytest

from cropline.models import PlayheadState
from cropline.playhead import (
    absolute_playhead_px,
    click_to_time,
    crop_playhead_px,
    cursor_px,
    player_duration_frames,
    total_frames,
)


class TestTotalFrames:
    def test_whole_frames(self) -> None:
        assert total_frames(10_000, 30) == 300

    def test_floors(self) -> None:
        assert total_frames(1000, 29.97) == 29

    def test_invalid_inputs(self) -> None:
        assert total_frames(0, 30) == 0
        assert total_frames(1000, 0) == 0

    def test_player_duration_at_least_one_frame(self) -> None:
        assert player_duration_frames(10, 30) == 1
        assert player_duration_frames(2000, 30) == 60


class TestPlayheadPx:
    def test_absolute(self) -> None:
        assert absolute_playhead_px(150, 300, 600) == pytest.approx(300)

    def test_absolute_no_frames(self) -> None:
        assert absolute_playhead_px(150, 0, 600) == 0.0

    def test_crop_relative(self) -> None:
        assert crop_playhead_px(5000, 30, 300, 600) == pytest.approx(300)

    def test_cursor_is_sum(self) -> None:
        state = PlayheadState(current_frame=30, total_duration_ms=10_000, fps=30)
        assert cursor_px(state, 5000, 600) == pytest.approx(60 + 300)

    def test_cursor_without_media(self) -> None:
        state = PlayheadState(current_frame=30, total_duration_ms=0, fps=30)
        assert cursor_px(state, 5000, 600) == 0.0


class TestClickToTime:
    def test_maps_pixels(self) -> None:
        assert click_to_time(250, 1000, 10_000) == pytest.approx(2500)

    def test_clamps_to_media(self) -> None:
        assert click_to_time(-5, 1000, 10_000) == 0.0
        assert click_to_time(1500, 1000, 10_000) == pytest.approx(10_000)

    def test_uninitialised_track(self) -> None:
        assert click_to_time(250, 0, 10_000) == 0.0
