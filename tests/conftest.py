"""Shared pytest fixtures for Cropline tests."""

import os

import numpy as np
import pytest

from cropline.config import TimelineConfig
from cropline.crop_range import CropRange
from cropline.models import MediaInfo
from cropline.surface import TimelineSurface


# ── Playback collaborator doubles ──────────────────────────────────


class FakeSignal:
    """Minimal stand-in for a Qt signal: connect / disconnect / emit."""

    def __init__(self) -> None:
        self.slots: list = []

    def connect(self, slot) -> None:
        self.slots.append(slot)

    def disconnect(self, slot) -> None:
        if slot not in self.slots:
            raise RuntimeError("slot not connected")
        self.slots.remove(slot)

    def emit(self, *args) -> None:
        for slot in list(self.slots):
            slot(*args)


class FakePlayer:
    """Records every call the timeline makes on its player."""

    def __init__(self) -> None:
        self.frame_updated = FakeSignal()
        self.calls: list[tuple] = []

    def seek_to(self, ms: float) -> None:
        self.calls.append(("seek_to", ms))

    def set_crop_start(self, ms: float) -> None:
        self.calls.append(("set_crop_start", ms))

    def set_crop_duration(self, ms: float) -> None:
        self.calls.append(("set_crop_duration", ms))

    def values(self, name: str) -> list:
        return [args[0] for (n, *args) in self.calls if n == name]


class FakeSettings:
    """Dict-backed ``QSettings`` lookalike."""

    def __init__(self, data: dict | None = None) -> None:
        self.data = dict(data or {})

    def value(self, key: str, default=None):
        return self.data.get(key, default)

    def setValue(self, key: str, value) -> None:  # noqa: N802
        self.data[key] = value

    def sync(self) -> None:
        pass


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def settings() -> FakeSettings:
    return FakeSettings()


# ── Crop ranges ────────────────────────────────────────────────────


@pytest.fixture
def events() -> list:
    """Ordered log of listener callbacks."""
    return []


@pytest.fixture
def crop(events: list) -> CropRange:
    """10 s of media on a 1000 px track, window at 100 px, 200 px wide."""
    return CropRange(
        total_duration_ms=10_000,
        initial_width_px=1000,
        offset_px=100,
        width_px=200,
        on_crop_time_changed=lambda ms: events.append(("crop_time", ms)),
        on_duration_changed=lambda ms: events.append(("duration", ms)),
        on_trim_to_start=lambda: events.append(("trim",)),
    )


# ── Surfaces ───────────────────────────────────────────────────────


@pytest.fixture
def media_info() -> MediaInfo:
    """10 s clip at 30 fps."""
    return MediaInfo(path="clip.mp4", duration_ms=10_000, fps=30.0, width=1280, height=720)


@pytest.fixture
def surface(player: FakePlayer, media_info: MediaInfo) -> TimelineSurface:
    """Ready surface: 400 px track (416 px container), unbounded max."""
    s = TimelineSurface(TimelineConfig(), player)
    s.media_ready(media_info)
    s.resize(416)
    return s


@pytest.fixture
def capped_surface(player: FakePlayer, media_info: MediaInfo) -> TimelineSurface:
    """Ready surface with a 4 s max selection on a 400 px track."""
    s = TimelineSurface(TimelineConfig(max_duration_ms=4000), player)
    s.media_ready(media_info)
    s.resize(416)
    return s


# ── Media files ────────────────────────────────────────────────────


@pytest.fixture
def tiny_video(tmp_path) -> str:
    """3 s, 10 fps, 64×48 MJPG clip written with OpenCV."""
    cv2 = pytest.importorskip("cv2")
    path = str(tmp_path / "clip.avi")
    writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*"MJPG"), 10.0, (64, 48))
    if not writer.isOpened():
        pytest.skip("MJPG video writer unavailable")
    for i in range(30):
        writer.write(np.full((48, 64, 3), i * 8, dtype=np.uint8))
    writer.release()
    return path


# ── Qt ─────────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def qapp():
    """Headless application instance for widgets, timers and signals."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    qtwidgets = pytest.importorskip("PySide6.QtWidgets")
    return qtwidgets.QApplication.instance() or qtwidgets.QApplication([])
