from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Sequence

from .models import SlideEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotationState:
    current_index: int
    activated_at: datetime

    @classmethod
    def start(cls, now: datetime) -> RotationState:
        return cls(current_index=0, activated_at=now)

    def restarted(self, now: datetime) -> RotationState:
        return replace(self, activated_at=now)


def advance(state: RotationState, slides: Sequence[SlideEntry], now: datetime) -> RotationState:
    """Move to the next slide once the current one has been up for its duration.

    The new slide is considered active from the old slide's deadline, not from
    ``now``, so the cadence does not drift with the poll interval. At most one
    step is taken per call; a display that was suspended for several durations
    catches up one poll at a time.
    """
    if not slides:
        return state

    entry = slides[state.current_index]
    deadline = state.activated_at + timedelta(seconds=entry.duration_secs)
    if now < deadline:
        return state

    next_index = (state.current_index + 1) % len(slides)
    logger.debug("advancing slide %d -> %d", state.current_index, next_index)
    return RotationState(current_index=next_index, activated_at=deadline)


def query(state: RotationState, slides: Sequence[SlideEntry]) -> SlideEntry | None:
    if not slides:
        return None
    return slides[state.current_index]
