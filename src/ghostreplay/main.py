"""Ghost replay entry point.

Commands:
    inspect <file> [step]   Print a serialized recording's summary and
                            sample its pose every ``step`` seconds.
    demo [seconds] [out]    Record a scripted actor for ``seconds``,
                            optionally write the run to ``out``, then
                            play it back as a ghost.

Usage:
    python -m ghostreplay.main demo 3
    # or via entry point:
    ghostreplay inspect best.ghost
"""

from __future__ import annotations

import asyncio
import logging
import math
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ghostreplay.engine.replay_controller import ReplayController
from ghostreplay.engine.tick_loop import TickLoop
from ghostreplay.loaders.replay_config_loader import (
    DEFAULT_REPLAY_CONFIG_PATH,
    load_replay_config,
)
from ghostreplay.models.recording import ParseError, Pose, Recording
from ghostreplay.models.run import RunKind
from ghostreplay.util.events import EventBus, ReplayCompleted, RunFinished
from ghostreplay.util.types import format_duration, format_pose

log = logging.getLogger(__name__)

USAGE = "usage: ghostreplay (inspect <file> [step] | demo [seconds] [out])"


# ===================================================================
# inspect
# ===================================================================


def inspect_recording(path: str | Path, step: float = 0.5) -> list[str]:
    """Load a serialized recording and describe it line by line.

    Raises:
        ParseError: If the file content is not a valid recording.
    """
    rec = Recording.from_string(Path(path).read_text())
    nx, ny, nr = rec.keyframe_counts()
    lines = [
        f"duration: {format_duration(rec.duration)}",
        f"keyframes: x={nx} y={ny} yaw={nr}",
    ]
    steps = int(rec.duration / step) if step > 0 else 0
    for i in range(steps + 1):
        t = i * step
        pose = rec.evaluate_at(t)
        lines.append(f"  t={t:7.3f}  {format_pose(pose.x, pose.y, pose.yaw)}")
    return lines


# ===================================================================
# demo
# ===================================================================


@dataclass
class DemoActor:
    """A scripted actor circling the origin, pausing every other lap."""

    radius: float = 5.0
    speed: float = 1.5
    started_at: float = 0.0
    pose: Pose | None = None

    def transform(self) -> tuple[float, float, float]:
        t = time.monotonic() - self.started_at
        # Hold still during odd seconds so flat spans show up.
        phase = math.floor(t) // 2 + min(t % 2.0, 1.0)
        angle = phase * self.speed
        x = self.radius * math.cos(angle)
        y = self.radius * math.sin(angle)
        return x, y, math.degrees(angle) % 360.0


class DemoAdapter:
    """Adapter that reads DemoActors and logs ghost movement."""

    def __init__(self) -> None:
        self.released: list[Any] = []

    def read_sample(self, actor: DemoActor) -> tuple[float, float, float]:
        return actor.transform()

    def apply_pose(self, actor: DemoActor, pose: Pose) -> None:
        actor.pose = pose
        log.debug("ghost -> %s", format_pose(pose.x, pose.y, pose.yaw))

    def release(self, actor: DemoActor) -> None:
        self.released.append(actor)
        log.info("ghost released")


async def run_demo(
    seconds: float = 3.0,
    out: str | None = None,
    config_path: str = DEFAULT_REPLAY_CONFIG_PATH,
) -> Recording:
    """Record a scripted actor, then replay the best run as a ghost."""
    config = load_replay_config(config_path)
    bus = EventBus()
    controller = ReplayController(DemoAdapter(), event_bus=bus, config=config)
    loop = TickLoop(controller, config)

    bus.on(RunFinished, lambda e: log.info(
        "finished %s (best=%s)", format_duration(e.duration), e.new_best))
    done = asyncio.Event()
    bus.on(ReplayCompleted, lambda e: done.set())

    task = asyncio.create_task(loop.run())
    try:
        controller.start_run(DemoActor(started_at=time.monotonic()))
        await asyncio.sleep(seconds)
        controller.finish_run()

        best = controller.get_run(RunKind.BEST)
        if out:
            Path(out).write_text(best.serialize())
            log.info("run written to %s", out)

        controller.play_recording(RunKind.BEST, DemoActor())
        await done.wait()
    finally:
        loop.stop()
        await task

    log.info(
        "capture ticks=%d playback ticks=%d avg tick=%.3fms",
        loop.capture_ticks, loop.playback_ticks, loop.avg_tick_duration_ms,
    )
    return best


# ===================================================================
# Entry point
# ===================================================================


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``ghostreplay`` command."""
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args or args[0] not in ("inspect", "demo"):
        print(USAGE, file=sys.stderr)
        return 2

    command, rest = args[0], args[1:]
    try:
        if command == "inspect":
            if not rest:
                print(USAGE, file=sys.stderr)
                return 2
            step = float(rest[1]) if len(rest) > 1 else 0.5
            for line in inspect_recording(rest[0], step):
                print(line)
        else:
            seconds = float(rest[0]) if rest else 3.0
            out = rest[1] if len(rest) > 1 else None
            asyncio.run(run_demo(seconds, out))
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Error: invalid recording: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
