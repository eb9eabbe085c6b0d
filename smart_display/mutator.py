"""
Edits to the slide list that keep the rotation state consistent.

Every function takes the current ``(slides, state)`` pair and returns a new
pair. Inputs are never modified and validation happens before anything is
built, so a raised error leaves the caller's state exactly as it was.
"""
from __future__ import annotations

import math
from collections import Counter, defaultdict, deque
from datetime import datetime
from typing import Any, Sequence

from .errors import NotFound, ValidationError
from .models import SlideEntry
from .scheduler import RotationState

Slides = tuple[SlideEntry, ...]
Result = tuple[Slides, RotationState]


def validate_url(image_url: Any, field: str = "imageUrl") -> str:
    if not isinstance(image_url, str) or not image_url.strip():
        raise ValidationError(field, "must be a non-empty URL")
    return image_url


def validate_duration(duration_secs: Any, field: str = "durationSecs") -> float:
    if isinstance(duration_secs, bool) or not isinstance(duration_secs, (int, float)):
        raise ValidationError(field, "must be a number")
    if not math.isfinite(duration_secs) or duration_secs <= 0:
        raise ValidationError(field, "must be greater than zero")
    return float(duration_secs)


def make_entry(image_url: Any, duration_secs: Any) -> SlideEntry:
    return SlideEntry.of(validate_url(image_url), validate_duration(duration_secs))


def _check_index(index: Any, upper: int) -> int:
    # upper is exclusive
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError("index", "must be an integer")
    if not 0 <= index < upper:
        raise ValidationError("index", f"out of range 0..{upper - 1}")
    return index


def position_of(slides: Sequence[SlideEntry], image_url: str) -> int:
    for idx, entry in enumerate(slides):
        if entry.image_url == image_url:
            return idx
    raise NotFound(image_url)


def create(
    slides: Slides, state: RotationState, image_url: Any, duration_secs: Any, now: datetime
) -> Result:
    entry = make_entry(image_url, duration_secs)
    if not slides:
        state = RotationState.start(now)
    return slides + (entry,), state


def delete(slides: Slides, state: RotationState, image_url: Any, now: datetime) -> Result:
    validate_url(image_url)
    return remove_at(slides, state, position_of(slides, image_url), now)


def update(
    slides: Slides,
    state: RotationState,
    now: datetime,
    image_url: Any = None,
    duration_secs: Any = None,
) -> Result:
    """Apply a partial patch.

    ``duration_secs`` is a global setting and is written to every entry.
    ``image_url`` jumps straight to that slide and restarts its timer.
    """
    if duration_secs is not None:
        duration_secs = validate_duration(duration_secs)
    target = None
    if image_url is not None:
        target = position_of(slides, validate_url(image_url))

    if duration_secs is not None:
        slides = tuple(entry.model_copy(update={"duration_secs": duration_secs}) for entry in slides)
    if target is not None:
        state = RotationState(current_index=target, activated_at=now)
    return slides, state


def insert_at(
    slides: Slides, state: RotationState, index: Any, entry: SlideEntry, now: datetime
) -> Result:
    index = _check_index(index, len(slides) + 1)
    inserted = slides[:index] + (entry,) + slides[index:]
    if not slides:
        return inserted, RotationState.start(now)
    if index <= state.current_index:
        state = RotationState(current_index=state.current_index + 1, activated_at=state.activated_at)
    return inserted, state


def remove_at(slides: Slides, state: RotationState, index: Any, now: datetime) -> Result:
    index = _check_index(index, len(slides))
    remaining = slides[:index] + slides[index + 1:]
    if not remaining:
        return remaining, RotationState.start(now)

    current = state.current_index
    if index < current:
        state = RotationState(current_index=current - 1, activated_at=state.activated_at)
    elif index == current:
        # the entry after the removed one slides into its place
        state = RotationState(current_index=current % len(remaining), activated_at=now)
    return remaining, state


def replace_at(
    slides: Slides, state: RotationState, index: Any, entry: SlideEntry, now: datetime
) -> Result:
    index = _check_index(index, len(slides))
    previous = slides[index]
    replaced = slides[:index] + (entry,) + slides[index + 1:]
    if index == state.current_index and previous.image_url != entry.image_url:
        state = state.restarted(now)
    return replaced, state


def reorder(slides: Slides, state: RotationState, image_urls: Any) -> Result:
    """Put the slides in the order given by ``image_urls``.

    The slide on screen stays on screen with its timer running.
    """
    if not isinstance(image_urls, (list, tuple)) or not all(isinstance(u, str) for u in image_urls):
        raise ValidationError("imageUrls", "must be a list of URLs")
    if Counter(image_urls) != Counter(entry.image_url for entry in slides):
        raise ValidationError("imageUrls", "must list every image in the rotation exactly once")
    if not slides:
        return slides, state

    positions: dict[str, deque[int]] = defaultdict(deque)
    for idx, entry in enumerate(slides):
        positions[entry.image_url].append(idx)
    order = [positions[url].popleft() for url in image_urls]

    reordered = tuple(slides[idx] for idx in order)
    current = order.index(state.current_index)
    return reordered, RotationState(current_index=current, activated_at=state.activated_at)


def replace_all(image_urls: Any, duration_secs: Any, now: datetime) -> Result:
    """Start over with ``image_urls``, every slide at ``duration_secs``."""
    duration_secs = validate_duration(duration_secs)
    if not isinstance(image_urls, (list, tuple)):
        raise ValidationError("imageUrls", "must be a list of URLs")
    replacement = tuple(
        SlideEntry.of(validate_url(url, f"imageUrls[{idx}]"), duration_secs)
        for idx, url in enumerate(image_urls)
    )
    return replacement, RotationState.start(now)
