"""Tests for the marker-file pause gate."""

from app.pause_gate import PauseGate


class TestPauseGate:
    def test_absent_marker_is_unpaused(self, tmp_path):
        assert PauseGate(tmp_path / ".paused").is_paused() is False

    def test_pause_and_resume(self, tmp_path):
        gate = PauseGate(tmp_path / "sub" / ".paused")

        gate.pause()
        assert gate.is_paused()
        assert (tmp_path / "sub" / ".paused").exists()

        gate.resume()
        assert not gate.is_paused()

    def test_resume_when_not_paused(self, tmp_path):
        PauseGate(tmp_path / ".paused").resume()

    def test_toggle(self, tmp_path):
        gate = PauseGate(tmp_path / ".paused")

        assert gate.toggle() is True
        assert gate.toggle() is False

    def test_external_marker_seen_immediately(self, tmp_path):
        marker = tmp_path / ".paused"
        gate = PauseGate(marker)
        assert not gate.is_paused()

        marker.touch()
        assert gate.is_paused()

        marker.unlink()
        assert not gate.is_paused()
