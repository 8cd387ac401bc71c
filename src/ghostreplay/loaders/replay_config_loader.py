"""Replay configuration — loads tunable constants from config/replay.yaml.

Provides a single ``ReplayConfig`` dataclass that is loaded once at
startup and handed to the controller and the tick loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

log = logging.getLogger(__name__)

DEFAULT_REPLAY_CONFIG_PATH = "config/replay.yaml"


@dataclass
class ReplayConfig:
    """All tunable capture/playback constants.

    Every field has a sensible default so a host can run without the
    file.
    """

    # -- Capture -----------------------------------------------------
    snapshot_stride: int = 2
    max_duration: float = 60.0

    # -- Timing ------------------------------------------------------
    capture_interval_ms: float = 20.0
    frame_interval_ms: float = 1000.0 / 60.0

    # -- Playback ----------------------------------------------------
    destroy_on_complete: bool = True

    @property
    def capture_interval(self) -> float:
        """Capture tick interval in seconds."""
        return self.capture_interval_ms / 1000.0

    @property
    def frame_interval(self) -> float:
        """Playback tick interval in seconds."""
        return self.frame_interval_ms / 1000.0


def load_replay_config(path: str | Path = DEFAULT_REPLAY_CONFIG_PATH) -> ReplayConfig:
    """Load replay configuration from a YAML file.

    Missing keys fall back to dataclass defaults, unknown keys are
    ignored.  If the file does not exist, a warning is logged and pure
    defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Replay config not found at %s, using defaults", p)
        return ReplayConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded replay config from %s (%d keys)", p, len(raw))

    return ReplayConfig(**{
        k: v for k, v in raw.items()
        if k in ReplayConfig.__dataclass_fields__
    })
