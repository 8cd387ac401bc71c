"""Run kinds — the named slots of the run registry."""

from __future__ import annotations

from enum import Enum


class RunKind(Enum):
    """Classification of a stored run."""

    LAST = "last"
    BEST = "best"
    SAVED = "saved"
