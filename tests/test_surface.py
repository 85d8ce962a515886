"""Tests for cropline.surface — lifecycle, pointer flow and the player contract."""

import logging

import pytest

from cropline.config import TimelineConfig
from cropline.interaction import GestureKind
from cropline.models import MediaInfo, Rect, Thumbnail
from cropline.surface import TimelineSurface


# ── lifecycle ───────────────────────────────────────────────────────


class TestLifecycle:
    def test_subscribes_to_player(self, player) -> None:
        s = TimelineSurface(player=player)
        assert len(player.frame_updated.slots) == 1

    def test_not_ready_before_media(self, player) -> None:
        s = TimelineSurface(player=player)
        s.resize(416)
        assert not s.is_ready
        assert s.pointer_press(50, 40) is False
        assert s.selection_rect() is None
        assert s.mask_rects() == []
        assert s.cursor_px() == 0.0

    def test_media_before_layout_waits_for_width(self, player, media_info) -> None:
        s = TimelineSurface(player=player)
        s.media_ready(media_info)
        assert not s.is_ready
        assert player.values("set_crop_start") == [0.0]
        assert player.values("set_crop_duration") == [10_000]
        s.resize(416)
        assert s.is_ready
        assert s.selection_rect() == Rect(0, 0, 400, 80)

    def test_track_width_excludes_padding(self, surface) -> None:
        assert surface.track_width == 400
        assert surface.track_rect() == Rect(0, 0, 400, 80)

    def test_max_duration_sets_initial_window(self, capped_surface, player) -> None:
        crop = capped_surface.crop_range
        assert crop.width_px == pytest.approx(160)
        assert capped_surface.state.duration_ms == pytest.approx(4000)
        assert player.values("set_crop_duration")[-1] == pytest.approx(4000)

    def test_new_media_resets_state(self, surface, media_info) -> None:
        surface.set_selection_percentages(offset_pct=50, width_pct=25)
        surface.on_frame_update(12)
        surface.media_ready(media_info)
        assert surface.state.crop_time_ms == 0.0
        assert surface.state.current_frame == 0
        assert surface.crop_range.offset_px == 0.0

    def test_dispose_unsubscribes(self, surface, player) -> None:
        surface.dispose()
        assert player.frame_updated.slots == []
        assert surface.is_disposed
        assert surface.crop_range is None
        assert surface.pointer_press(50, 40) is False
        assert surface.resize(800) is False

    def test_dispose_twice(self, surface) -> None:
        surface.dispose()
        surface.dispose()
        assert surface.is_disposed

    def test_repaint_requested(self, player, media_info) -> None:
        repaints = []
        s = TimelineSurface(player=player, on_repaint=lambda: repaints.append(1))
        s.media_ready(media_info)
        s.resize(416)
        assert len(repaints) >= 2


# ── pointer flow ────────────────────────────────────────────────────


class TestPointer:
    def test_hover_kinds(self, capped_surface) -> None:
        assert capped_surface.hover_kind(0, 40) is GestureKind.RESIZE_LEFT
        assert capped_surface.hover_kind(80, 40) is GestureKind.MOVE
        assert capped_surface.hover_kind(160, 40) is GestureKind.RESIZE_RIGHT
        assert capped_surface.hover_kind(300, 40) is None

    def test_drag_body_updates_crop_time(self, capped_surface, player) -> None:
        assert capped_surface.pointer_press(80, 40)
        assert capped_surface.is_dragging
        capped_surface.pointer_move(120, 40)
        assert capped_surface.crop_range.offset_px == pytest.approx(40)
        assert capped_surface.state.crop_time_ms == pytest.approx(1000)
        assert player.values("set_crop_start")[-1] == pytest.approx(1000)
        assert capped_surface.pointer_release()
        assert not capped_surface.is_dragging

    def test_resize_commits_duration_on_release(self, capped_surface, player) -> None:
        capped_surface.pointer_press(160, 40)
        capped_surface.pointer_move(120, 40)
        assert capped_surface.state.duration_ms == pytest.approx(4000)
        capped_surface.pointer_release()
        assert capped_surface.state.duration_ms == pytest.approx(3000)
        assert player.values("set_crop_duration")[-1] == pytest.approx(3000)

    def test_left_snap_seeks_player_to_zero(self, surface, player) -> None:
        surface.set_selection_percentages(offset_pct=25, width_pct=25)
        surface.pointer_press(100, 40)
        surface.pointer_move(-20, 40)
        crop = surface.crop_range
        assert (crop.offset_px, crop.width_px) == (pytest.approx(0), pytest.approx(200))
        assert player.values("seek_to") == [0]
        assert player.values("set_crop_start")[-1] == pytest.approx(0)

    def test_click_outside_window_sets_crop_time(self, surface, player) -> None:
        surface.set_selection_percentages(offset_pct=50, width_pct=25)
        assert surface.pointer_press(50, 40) is True
        assert not surface.is_dragging
        assert surface.state.crop_time_ms == pytest.approx(1250)
        assert player.values("set_crop_start")[-1] == pytest.approx(1250)
        assert surface.crop_range.offset_px == pytest.approx(200)

    def test_press_below_track_ignored(self, surface) -> None:
        assert surface.pointer_press(50, 200) is False

    def test_release_without_gesture(self, surface) -> None:
        assert surface.pointer_release() is False

    def test_resize_mid_gesture_keeps_pointer_relation(self, surface) -> None:
        surface.set_selection_percentages(offset_pct=25, width_pct=25)
        surface.pointer_press(150, 40)
        surface.resize(816)
        surface.pointer_move(320, 40)
        assert surface.crop_range.offset_px == pytest.approx(220)


# ── programmatic edits and read model ──────────────────────────────


class TestReadModel:
    def test_frame_update_moves_cursor(self, surface, player) -> None:
        player.frame_updated.emit(30)
        assert surface.state.current_frame == 30
        assert surface.cursor_px() == pytest.approx(40)

    def test_cursor_adds_crop_offset(self, surface, player) -> None:
        surface.set_selection_percentages(offset_pct=50, width_pct=25)
        player.frame_updated.emit(30)
        assert surface.cursor_px() == pytest.approx(40 + 200)

    def test_mask_follows_selection(self, surface) -> None:
        surface.set_selection_percentages(offset_pct=25, width_pct=50)
        assert surface.mask_rects() == [Rect(0, 0, 100, 80), Rect(300, 0, 100, 80)]

    def test_resize_preserves_percentages(self, surface) -> None:
        surface.set_selection_percentages(offset_pct=25, width_pct=25)
        surface.resize(816)
        off, width = surface.selection_percentages()
        assert (off, width) == (pytest.approx(25), pytest.approx(25))
        assert surface.crop_range.start_time_ms == pytest.approx(2500)

    def test_set_max_duration(self, surface) -> None:
        assert surface.set_max_duration_ms(2000) is True
        assert surface.crop_range.width_px == pytest.approx(80)
        assert surface.state.duration_ms == pytest.approx(2000)

    def test_space(self, surface) -> None:
        space = surface.space()
        assert space.pixel_width == 400
        assert space.ms_per_px == pytest.approx(25)

    def test_height_follows_container(self, surface) -> None:
        surface.resize(416, 60)
        assert surface.track_height == 60
        assert surface.selection_rect().height == 60


class TestThumbnails:
    def test_late_thumbnails_relayout(self, surface) -> None:
        before = surface.crop_range.geometry
        thumbs = [Thumbnail(index=i, timestamp_ms=i * 625.0) for i in range(16)]
        surface.set_thumbnails(thumbs)
        assert surface.thumbnail_layout.cols == 16
        assert surface.thumbnail_layout.thumb_width == pytest.approx(25)
        assert surface.crop_range.geometry == before

    def test_gaps_logged(self, surface, caplog) -> None:
        thumbs = [Thumbnail(index=i, timestamp_ms=0.0) for i in range(4)]
        with caplog.at_level(logging.WARNING, logger="cropline.surface"):
            surface.set_thumbnails(thumbs)
        assert "4 of 4 thumbnails missing" in caplog.text

    def test_new_media_clears_strip(self, surface, media_info) -> None:
        surface.set_thumbnails([Thumbnail(index=0, timestamp_ms=0.0)])
        surface.media_ready(media_info)
        assert surface.thumbnails == []
        assert surface.thumbnail_layout.cols == 0
