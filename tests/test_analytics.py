"""Tests for AnalyticsRecorder."""

import json
from pathlib import Path

from preload_skills.core.config import TriggerType
from preload_skills.session.analytics import AnalyticsRecorder


class TestAnalyticsRecorder:
    """Tests for recording and persisting skill usage."""

    def test_disabled_recorder_does_nothing(self, tmp_path: Path):
        path = tmp_path / "analytics.json"
        recorder = AnalyticsRecorder(path, enabled=False)

        recorder.track("s1", "a", TriggerType.INITIAL)
        recorder.save()

        assert recorder.get("s1") is None
        assert not path.exists()

    def test_track_writes_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "analytics.json"
        recorder = AnalyticsRecorder(path, enabled=True)

        recorder.track("s1", "a", TriggerType.FILE_TYPE)

        data = json.loads(path.read_text())
        entry = data["s1"]
        assert entry["sessionId"] == "s1"
        usage = entry["skillUsage"]["a"]
        assert usage["skillName"] == "a"
        assert usage["loadCount"] == 1
        assert usage["triggerType"] == "fileType"
        assert usage["firstLoaded"] == usage["lastLoaded"]
        assert usage["firstLoaded"] > 0

    def test_repeat_track_increments(self, tmp_path: Path):
        recorder = AnalyticsRecorder(tmp_path / "a.json", enabled=True)
        recorder.track("s1", "a", TriggerType.PATH)
        recorder.track("s1", "a", TriggerType.CONTENT)

        stats = recorder.get("s1").skill_usage["a"]
        assert stats.load_count == 2
        # First trigger is kept
        assert stats.trigger_type is TriggerType.PATH
        assert stats.last_loaded >= stats.first_loaded

    def test_ensure_only_records_once(self, tmp_path: Path):
        recorder = AnalyticsRecorder(tmp_path / "a.json", enabled=True)
        recorder.ensure("s1", "a", TriggerType.INITIAL)
        recorder.ensure("s1", "a", TriggerType.INITIAL)
        assert recorder.get("s1").skill_usage["a"].load_count == 1

    def test_discard_then_save_drops_session(self, tmp_path: Path):
        path = tmp_path / "a.json"
        recorder = AnalyticsRecorder(path, enabled=True)
        recorder.track("s1", "a", TriggerType.INITIAL)
        recorder.track("s2", "b", TriggerType.INITIAL)

        recorder.discard("s1")
        recorder.save()

        assert set(json.loads(path.read_text())) == {"s2"}

    def test_write_failure_is_logged(self, tmp_path: Path, caplog):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        recorder = AnalyticsRecorder(blocker / "analytics.json", enabled=True)

        recorder.track("s1", "a", TriggerType.INITIAL)

        assert recorder.get("s1") is not None
        assert "Failed to save analytics" in caplog.text
