"""Tests for cropline.media — probing opened videos."""

import pytest

from cropline.media import MediaError, probe_media


class TestProbeMedia:
    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(MediaError):
            probe_media(str(tmp_path / "missing.avi"))

    def test_probe(self, tiny_video: str) -> None:
        info = probe_media(tiny_video)
        assert info.path == tiny_video
        assert info.fps == pytest.approx(10)
        assert (info.width, info.height) == (64, 48)
        assert info.frame_count == 30
        assert info.duration_ms == pytest.approx(3000)
        assert info.total_frames == 30

    def test_probe_logs(self, tiny_video: str, caplog) -> None:
        with caplog.at_level("INFO", logger="cropline.media"):
            probe_media(tiny_video)
        assert "probe_media" in caplog.text
