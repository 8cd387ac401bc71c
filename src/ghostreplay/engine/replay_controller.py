"""Replay controller — run lifecycle and ghost playback.

Responsibilities:
- Capture one active run from a live actor on the fixed capture tick
- Keep the Last / Best / Saved run registry up to date
- Drive one ghost actor from a stored run on the playback tick

The controller never touches host objects directly.  Reading the live
actor's transform, applying a pose to the ghost and releasing the ghost
all go through an :class:`ActorAdapter` supplied by the host.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol

from ghostreplay.models.recording import Pose, Recording, Sample
from ghostreplay.models.run import RunKind
from ghostreplay.util.events import (
    ReplayCompleted,
    ReplayStarted,
    ReplayStopped,
    RunDiscarded,
    RunFinished,
    RunStarted,
)

if TYPE_CHECKING:
    from ghostreplay.loaders.replay_config_loader import ReplayConfig
    from ghostreplay.util.events import EventBus

log = logging.getLogger(__name__)


class ActorAdapter(Protocol):
    """Host boundary for live and ghost actors."""

    def read_sample(self, actor: Any) -> tuple[float, float, float]:
        """Return the actor's current ``(x, y, yaw)``."""
        ...

    def apply_pose(self, actor: Any, pose: Pose) -> None:
        """Move the ghost actor to ``pose``."""
        ...

    def release(self, actor: Any) -> None:
        """Destroy the ghost actor or hand it back to the host."""
        ...


class ReplayController:
    """Records runs and plays them back as ghosts.

    Args:
        adapter: Host boundary used to read and drive actors.
        event_bus: Optional bus for lifecycle events.
        config: Optional defaults for stride, duration limit and cleanup.
    """

    def __init__(
        self,
        adapter: ActorAdapter,
        event_bus: Optional[EventBus] = None,
        config: Optional[ReplayConfig] = None,
    ) -> None:
        self._adapter = adapter
        self._events = event_bus
        self._config = config

        self._runs: dict[RunKind, Recording | None] = {}

        # Capture state
        self._current_run: Recording | None = None
        self._actor: Any = None
        self._elapsed_recording: float = 0.0
        self._snapshot_stride: int = 1
        self._frame_count: int = 0
        self._max_duration: float = 0.0

        # Playback state
        self._current_replay: Recording | None = None
        self._replay_kind: RunKind | None = None
        self._ghost: Any = None
        self._destroy_on_complete: bool = True
        self._elapsed_playback: float = 0.0

    # -- Recording -----------------------------------------------------

    def start_run(
        self,
        actor: Any,
        snapshot_stride: int | None = None,
        max_duration: float | None = None,
    ) -> None:
        """Begin recording ``actor``.

        Args:
            actor: Host object whose transform is sampled each capture.
            snapshot_stride: Capture every Nth tick.  Values below 1 are
                treated as 1.
            max_duration: Finish the run automatically at this length.
        """
        if snapshot_stride is None:
            snapshot_stride = self._config.snapshot_stride if self._config else 2
        if max_duration is None:
            max_duration = self._config.max_duration if self._config else 60.0

        if self._current_run is not None:
            log.info("Run restarted, discarding %.2fs in progress", self._current_run.duration)

        self._current_run = Recording()
        self._actor = actor
        self._elapsed_recording = 0.0
        self._snapshot_stride = max(1, int(snapshot_stride))
        self._frame_count = 0
        self._max_duration = max_duration

        log.info("Run started (stride=%d, limit=%.1fs)", self._snapshot_stride, max_duration)
        self._emit(RunStarted(snapshot_stride=self._snapshot_stride, max_duration=max_duration))

    def capture_tick(self, dt: float) -> None:
        """Fixed-rate tick: sample the live actor, honouring the stride."""
        run = self._current_run
        if run is None:
            return

        if self._frame_count % self._snapshot_stride == 0:
            x, y, yaw = self._adapter.read_sample(self._actor)
            run.add_sample(Sample(time=self._elapsed_recording, x=x, y=y, yaw=yaw))
        self._frame_count += 1

        if run.duration >= self._max_duration:
            log.info("Run hit the %.1fs limit", self._max_duration)
            self.finish_run()

        self._elapsed_recording += dt

    def finish_run(self, save: bool = True) -> bool:
        """Complete the current run.

        Args:
            save: Store the run.  Use False for restarts.

        Returns:
            True if the run was stored as the new best.
        """
        run = self._current_run
        if run is None:
            return False

        self._current_run = None
        self._actor = None

        if not save:
            log.info("Run discarded after %.2fs", run.duration)
            self._emit(RunDiscarded(duration=run.duration))
            return False

        self._runs[RunKind.LAST] = run

        best = self._runs.get(RunKind.BEST)
        new_best = best is None or run.duration <= best.duration
        if new_best:
            self._runs[RunKind.BEST] = run

        log.info("Run finished in %.2fs%s", run.duration, " (new best)" if new_best else "")
        self._emit(RunFinished(duration=run.duration, new_best=new_best))
        return new_best

    def set_saved_run(self, run: Recording | None) -> None:
        """Set the saved run, e.g. one pulled from a leaderboard.

        Passing None empties the slot; playing it then releases the ghost.
        """
        self._runs[RunKind.SAVED] = run
        if run is None:
            log.info("Saved run cleared")
        else:
            log.info("Saved run set (%.2fs)", run.duration)

    def get_run(self, kind: RunKind) -> Recording | None:
        """Return the stored run of ``kind``, or None."""
        return self._runs.get(kind)

    # -- Playback ------------------------------------------------------

    def play_recording(
        self,
        kind: RunKind,
        ghost: Any,
        destroy_on_complete: bool | None = None,
    ) -> bool:
        """Begin playing a stored run on ``ghost``.

        Any ghost already playing is released first.  If no run of
        ``kind`` exists the new ghost is released straight away.

        Args:
            kind: Which run to play.
            ghost: Pre-created visual actor; the controller owns it until
                it is released.
            destroy_on_complete: Release the ghost when the run ends.

        Returns:
            True if playback started.
        """
        if destroy_on_complete is None:
            destroy_on_complete = self._config.destroy_on_complete if self._config else True

        self._release_ghost()
        if self._current_replay is not None:
            self._emit(ReplayStopped(kind=self._replay_kind.value))

        run = self._runs.get(kind)
        self._current_replay = run
        self._replay_kind = kind
        self._elapsed_playback = 0.0
        self._destroy_on_complete = destroy_on_complete

        if run is None:
            log.info("No %s run to play", kind.value)
            self._replay_kind = None
            self._adapter.release(ghost)
            return False

        self._ghost = ghost
        log.info("Playing %s run (%.2fs)", kind.value, run.duration)
        self._emit(ReplayStarted(kind=kind.value, duration=run.duration))
        return True

    def playback_tick(self, dt: float) -> None:
        """Variable-rate tick: move the ghost along its run."""
        run = self._current_replay
        if run is None:
            return

        self._elapsed_playback += dt
        self._adapter.apply_pose(self._ghost, run.evaluate_at(self._elapsed_playback))

        if self._elapsed_playback > run.duration:
            kind = self._replay_kind
            self._current_replay = None
            self._replay_kind = None
            if self._destroy_on_complete:
                self._release_ghost()
            log.info("Replay of %s run complete", kind.value)
            self._emit(ReplayCompleted(kind=kind.value))

    def stop_replay(self) -> None:
        """Stop the ghost, e.g. when the player finishes first."""
        self._release_ghost()
        if self._current_replay is not None:
            log.info("Replay of %s run stopped", self._replay_kind.value)
            self._emit(ReplayStopped(kind=self._replay_kind.value))
        self._current_replay = None
        self._replay_kind = None

    def _release_ghost(self) -> None:
        if self._ghost is not None:
            ghost, self._ghost = self._ghost, None
            self._adapter.release(ghost)

    # -- Introspection -------------------------------------------------

    @property
    def is_recording(self) -> bool:
        return self._current_run is not None

    @property
    def is_playing(self) -> bool:
        return self._current_replay is not None

    @property
    def current_run(self) -> Recording | None:
        return self._current_run

    @property
    def current_replay(self) -> Recording | None:
        return self._current_replay

    @property
    def ghost(self) -> Any:
        return self._ghost

    @property
    def recording_elapsed(self) -> float:
        return self._elapsed_recording

    @property
    def playback_elapsed(self) -> float:
        return self._elapsed_playback

    def _emit(self, event: object) -> None:
        if self._events is not None:
            self._events.emit(event)
