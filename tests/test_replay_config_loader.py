"""Tests for loading replay configuration from YAML."""

import pytest

from ghostreplay.loaders.replay_config_loader import ReplayConfig, load_replay_config


class TestLoadReplayConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = load_replay_config(tmp_path / "nope.yaml")
        assert cfg == ReplayConfig()

    def test_empty_file_uses_defaults(self, tmp_path):
        f = tmp_path / "replay.yaml"
        f.write_text("")
        assert load_replay_config(f) == ReplayConfig()

    def test_partial_file(self, tmp_path):
        f = tmp_path / "replay.yaml"
        f.write_text("snapshot_stride: 4\nmax_duration: 90.5\n")
        cfg = load_replay_config(f)
        assert cfg.snapshot_stride == 4
        assert cfg.max_duration == pytest.approx(90.5)
        assert cfg.destroy_on_complete is True

    def test_unknown_keys_ignored(self, tmp_path):
        f = tmp_path / "replay.yaml"
        f.write_text("ghost_colour: blue\ndestroy_on_complete: false\n")
        cfg = load_replay_config(f)
        assert cfg.destroy_on_complete is False
        assert not hasattr(cfg, "ghost_colour")

    def test_intervals_in_seconds(self):
        cfg = ReplayConfig(capture_interval_ms=20.0, frame_interval_ms=10.0)
        assert cfg.capture_interval == pytest.approx(0.02)
        assert cfg.frame_interval == pytest.approx(0.01)


class TestDefaultConfigFile:
    def test_shipped_config_loads(self):
        from pathlib import Path

        path = Path(__file__).resolve().parents[1] / "config" / "replay.yaml"
        cfg = load_replay_config(path)
        assert cfg.snapshot_stride == 2
        assert cfg.max_duration == pytest.approx(60.0)
