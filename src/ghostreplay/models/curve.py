"""Curve model — a time-keyed scalar track with smooth interpolation.

A Curve holds one channel of a recording (x, y or yaw).  Keys are kept
sorted by time.  Evaluation uses a cubic Hermite segment with flat
tangents at every key, so the curve passes through each key, never
overshoots between two keys, and holds its boundary values outside the
keyed range.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator

log = logging.getLogger(__name__)

# Tolerance used when deciding whether two captured values are "the same".
REL_TOLERANCE = 1e-5
ABS_TOLERANCE = 1e-6


def approximately(a: float, b: float) -> bool:
    """Return True if two channel values are equal within tolerance."""
    return math.isclose(a, b, rel_tol=REL_TOLERANCE, abs_tol=ABS_TOLERANCE)


@dataclass(frozen=True)
class Keyframe:
    """A single (time, value) anchor on a curve.

    Attributes:
        time: Seconds since the start of the recording.
        value: Channel value at that time.
    """

    time: float
    value: float


class Curve:
    """An ordered track of keyframes for one scalar channel."""

    def __init__(self) -> None:
        self._keys: list[Keyframe] = []
        self._times: list[float] = []

    # -- Capture -------------------------------------------------------

    def capture(self, time: float, value: float) -> None:
        """Append a captured value, collapsing flat runs.

        If the last two keys hold the same value and the incoming value
        matches it too, the trailing key is moved forward in time instead
        of growing the curve.  A capture at the trailing key's exact time
        overwrites that key.
        """
        kf = Keyframe(time, value)
        count = len(self._keys)

        if count and time == self._times[-1]:
            self._set_last(kf)
            return

        if (
            count > 1
            and approximately(self._keys[-1].value, self._keys[-2].value)
            and approximately(value, self._keys[-1].value)
        ):
            self._set_last(kf)
        else:
            self._keys.append(kf)
            self._times.append(time)

    def _set_last(self, kf: Keyframe) -> None:
        self._keys[-1] = kf
        self._times[-1] = kf.time

    # -- Loading -------------------------------------------------------

    def add_key(self, time: float, value: float) -> bool:
        """Insert a key in time order without collapsing.

        Returns False (and leaves the curve unchanged) if a key already
        exists at exactly ``time``.
        """
        idx = bisect_right(self._times, time)
        if idx > 0 and self._times[idx - 1] == time:
            log.debug("Duplicate key at t=%.3f dropped", time)
            return False
        self._keys.insert(idx, Keyframe(time, value))
        self._times.insert(idx, time)
        return True

    # -- Evaluation ----------------------------------------------------

    def evaluate(self, time: float) -> float:
        """Evaluate the curve at ``time``.

        Before the first key the first value is returned, after the last
        key the last value.  An empty curve evaluates to 0.0.
        """
        if not self._keys:
            return 0.0
        if time <= self._times[0]:
            return self._keys[0].value
        if time >= self._times[-1]:
            return self._keys[-1].value

        idx = bisect_right(self._times, time)
        k0 = self._keys[idx - 1]
        k1 = self._keys[idx]
        span = k1.time - k0.time
        s = (time - k0.time) / span
        # Hermite basis with zero tangents: h01(s) = 3s^2 - 2s^3
        return k0.value + (k1.value - k0.value) * (s * s * (3.0 - 2.0 * s))

    # -- Accessors -----------------------------------------------------

    @property
    def keys(self) -> tuple[Keyframe, ...]:
        return tuple(self._keys)

    @property
    def end_time(self) -> float:
        """Time of the last key, or 0.0 for an empty curve."""
        return self._times[-1] if self._times else 0.0

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self._keys)

    def __repr__(self) -> str:
        return f"Curve(keys={len(self._keys)}, end_time={self.end_time:.3f})"
