"""Recording model — the captured motion of one actor over one run.

A Recording owns three curves (x, y and yaw).  It is filled
incrementally during a run via :meth:`Recording.add_snapshot`, evaluated
during playback via :meth:`Recording.evaluate_at`, and round-trips
through a compact text format for leaderboards and save files.

Text format::

    <x keys>\\n<y keys>\\n<yaw keys>
    keys := "t0,v0|t1,v1|...|tn,vn"

Times are written with 3 decimals, values with 2.  The encoding is
lossy by design.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ghostreplay.models.curve import Curve

log = logging.getLogger(__name__)

CURVE_DELIMITER = "\n"
DATA_DELIMITER = "|"
PAIR_DELIMITER = ","


class ParseError(ValueError):
    """Raised when serialized recording text is malformed."""


@dataclass(frozen=True)
class Sample:
    """One captured transform reading: time plus 2D position and yaw."""

    time: float
    x: float
    y: float
    yaw: float


@dataclass(frozen=True)
class Pose:
    """Evaluated playback pose.

    Only x, y and yaw are modelled; ``position`` and ``rotation`` expand
    the pose to 3D with the remaining components fixed at zero.
    """

    x: float
    y: float
    yaw: float

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, 0.0)

    @property
    def rotation(self) -> tuple[float, float, float]:
        """Euler angles in degrees (roll, pitch, yaw)."""
        return (0.0, 0.0, self.yaw)


class Recording:
    """Three curves describing one actor's motion.

    Attributes:
        duration: Time of the last snapshot while recording, or the end
            of the longer position curve for a loaded recording.
    """

    def __init__(self) -> None:
        self.pos_x = Curve()
        self.pos_y = Curve()
        self.rot_yaw = Curve()
        self.duration: float = 0.0
        self._snapshots = 0

    # -- Recording -----------------------------------------------------

    def add_snapshot(
        self, elapsed: float, position: tuple[float, float], yaw: float
    ) -> None:
        """Capture the actor's state at ``elapsed`` seconds into the run.

        Times must not decrease between calls; an earlier time is clamped
        to the previous one.
        """
        if self._snapshots and elapsed < self.duration:
            log.warning(
                "Snapshot time %.4f precedes previous %.4f, clamping",
                elapsed, self.duration,
            )
            elapsed = self.duration

        self.duration = elapsed
        self._snapshots += 1

        x, y = position
        self.pos_x.capture(elapsed, x)
        self.pos_y.capture(elapsed, y)
        self.rot_yaw.capture(elapsed, yaw)

    def add_sample(self, sample: Sample) -> None:
        """Capture a :class:`Sample`."""
        self.add_snapshot(sample.time, (sample.x, sample.y), sample.yaw)

    # -- Playback ------------------------------------------------------

    def evaluate_at(self, elapsed: float) -> Pose:
        """Interpolate the pose at ``elapsed`` seconds."""
        return Pose(
            x=self.pos_x.evaluate(elapsed),
            y=self.pos_y.evaluate(elapsed),
            yaw=self.rot_yaw.evaluate(elapsed),
        )

    # -- Saving and loading --------------------------------------------

    def serialize(self) -> str:
        """Encode the three curves as delimiter-separated text."""
        return CURVE_DELIMITER.join(
            _stringify(curve) for curve in (self.pos_x, self.pos_y, self.rot_yaw)
        )

    @classmethod
    def from_string(cls, data: str) -> Recording:
        """Build a Recording from :meth:`serialize` output.

        Keys are stored exactly as given (no collapsing).  Raises
        :class:`ParseError` if the text does not hold three non-empty
        curves of ``time,value`` pairs.
        """
        components = data.split(CURVE_DELIMITER)
        if len(components) != 3:
            raise ParseError(
                f"Expected 3 curves, got {len(components)}"
            )

        rec = cls()
        for index, (curve, text) in enumerate(
            zip((rec.pos_x, rec.pos_y, rec.rot_yaw), components)
        ):
            _parse_curve(curve, text, index)

        rec.duration = max(rec.pos_x.end_time, rec.pos_y.end_time)
        return rec

    deserialize = from_string

    # -- Introspection -------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not (len(self.pos_x) or len(self.pos_y) or len(self.rot_yaw))

    def keyframe_counts(self) -> tuple[int, int, int]:
        return len(self.pos_x), len(self.pos_y), len(self.rot_yaw)

    def __repr__(self) -> str:
        nx, ny, nr = self.keyframe_counts()
        return (
            f"Recording(duration={self.duration:.3f}, "
            f"keys=({nx}, {ny}, {nr}))"
        )


def _stringify(curve: Curve) -> str:
    return DATA_DELIMITER.join(
        f"{kf.time:.3f}{PAIR_DELIMITER}{kf.value:.2f}" for kf in curve
    )


def _parse_curve(curve: Curve, text: str, index: int) -> None:
    for pair in text.split(DATA_DELIMITER):
        parts = pair.split(PAIR_DELIMITER)
        if len(parts) != 2:
            raise ParseError(f"Curve {index}: malformed key {pair!r}")
        try:
            time, value = float(parts[0]), float(parts[1])
        except ValueError:
            raise ParseError(f"Curve {index}: non-numeric key {pair!r}") from None
        if not (math.isfinite(time) and math.isfinite(value)):
            raise ParseError(f"Curve {index}: non-finite key {pair!r}")
        curve.add_key(time, value)

    if not len(curve):
        raise ParseError(f"Curve {index}: no keyframes")
