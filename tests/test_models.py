"""Tests for cropline.models — value types and shared state."""

import numpy as np
import pytest

from cropline.models import (
    MediaInfo,
    Rect,
    Thumbnail,
    TimelineSpace,
    TimelineState,
)


class TestTimelineSpace:
    def test_ms_per_px(self) -> None:
        assert TimelineSpace(400, 10_000).ms_per_px == pytest.approx(25)

    def test_rejects_zero_width(self) -> None:
        with pytest.raises(ValueError):
            TimelineSpace(0, 10_000)

    def test_rejects_negative_duration(self) -> None:
        with pytest.raises(ValueError):
            TimelineSpace(400, -1)

    def test_frozen(self) -> None:
        space = TimelineSpace(400, 10_000)
        with pytest.raises(AttributeError):
            space.pixel_width = 800  # type: ignore[misc]

    def test_tick_interval_keeps_labels_apart(self) -> None:
        # 25 ms per px: 60 px needs at least 1500 ms
        assert TimelineSpace(400, 10_000).tick_interval_ms(60) == 2000

    def test_ticks_map_time_to_pixels(self) -> None:
        ticks = TimelineSpace(400, 10_000).ticks(60)
        assert ticks[0] == (0.0, 0.0)
        assert ticks[1] == (2000.0, pytest.approx(80))
        assert ticks[-1] == (10_000.0, pytest.approx(400))

    def test_long_media_uses_coarsest_interval(self) -> None:
        space = TimelineSpace(100, 100 * 3_600_000)
        assert space.tick_interval_ms(60) == 3_600_000

    def test_no_ticks_without_duration(self) -> None:
        assert TimelineSpace(400, 0).ticks() == []


class TestRect:
    def test_edges(self) -> None:
        r = Rect(10, 20, 100, 50)
        assert r.right == 110
        assert r.bottom == 70
        assert r.area == 5000

    def test_negative_size_has_no_area(self) -> None:
        assert Rect(0, 0, -5, 10).area == 0

    def test_contains(self) -> None:
        r = Rect(10, 20, 100, 50)
        assert r.contains(10, 20)
        assert r.contains(110, 70)
        assert not r.contains(111, 30)

    def test_as_tuple(self) -> None:
        assert Rect(1, 2, 3, 4).as_tuple() == (1, 2, 3, 4)


class TestTimelineState:
    def test_reset_keeps_settings(self) -> None:
        st = TimelineState(
            total_duration_ms=10_000, duration_ms=4000, crop_time_ms=1200,
            fps=25, current_frame=40, max_duration_ms=4000,
        )
        st.reset()
        assert st.total_duration_ms == 0
        assert st.duration_ms == 0
        assert st.crop_time_ms == 0
        assert st.current_frame == 0
        assert st.fps == 25
        assert st.max_duration_ms == 4000


class TestMediaInfo:
    def test_total_frames(self) -> None:
        info = MediaInfo(path="a.mp4", duration_ms=10_000, fps=30)
        assert info.total_frames == 300

    def test_total_frames_without_fps(self) -> None:
        assert MediaInfo(path="a.mp4", duration_ms=10_000, fps=0).total_frames == 0

    def test_to_dict_keys(self) -> None:
        d = MediaInfo("a.mp4", 1000, 30, 640, 360, 30).to_dict()
        assert d == {
            "path": "a.mp4",
            "durationMs": 1000,
            "fps": 30,
            "width": 640,
            "height": 360,
            "frameCount": 30,
        }


class TestThumbnail:
    def test_gap(self) -> None:
        assert Thumbnail(index=0, timestamp_ms=0.0).is_gap

    def test_decoded(self) -> None:
        thumb = Thumbnail(index=1, timestamp_ms=500.0, image=np.zeros((2, 2, 3), np.uint8))
        assert not thumb.is_gap
