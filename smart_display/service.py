"""
The slideshow application context.

One ``SlideshowService`` is created at startup and handed to every request
handler. It owns the slide list, the rotation state and the global slide
duration, and serialises every read and write of them behind a single lock.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, NamedTuple

from . import mutator
from .config import DEFAULT_DURATION_SECS
from .models import Listing, SlideEntry, Snapshot
from .scheduler import RotationState, advance, query
from .storage import ConfigStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class View(NamedTuple):
    slides: tuple[SlideEntry, ...]
    state: RotationState
    duration_secs: float

    @property
    def current_index(self) -> int | None:
        return self.state.current_index if self.slides else None


class SlideshowService:
    def __init__(
        self,
        store: ConfigStore,
        clock: Clock = utc_now,
        default_duration_secs: float = DEFAULT_DURATION_SECS,
    ) -> None:
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()
        document = store.load()
        self._slides = tuple(document.entries)
        if document.duration_secs is not None:
            self._duration = document.duration_secs
        elif self._slides:
            self._duration = self._slides[0].duration_secs
        else:
            self._duration = default_duration_secs
        self._state = RotationState.start(clock())

    # Reads

    def poll(self) -> Snapshot:
        """Advance the rotation if it is due and report what to show now."""
        with self._lock:
            now = self.clock()
            self._state = advance(self._state, self._slides, now)
            entry = query(self._state, self._slides)
        return Snapshot(
            image_url=entry.image_url if entry else None,
            date_time=now.astimezone().isoformat(),
        )

    def listing(self) -> Listing:
        with self._lock:
            entry = query(self._state, self._slides)
            return Listing(
                duration_secs=self._duration,
                image_urls=[e.image_url for e in self._slides],
                image_url=entry.image_url if entry else None,
            )

    def entries(self) -> tuple[SlideEntry, ...]:
        with self._lock:
            return self._slides

    def view(self) -> View:
        with self._lock:
            return View(self._slides, self._state, self._duration)

    # Writes

    def create(self, image_url: Any) -> None:
        with self._lock:
            self._commit(mutator.create(self._slides, self._state, image_url, self._duration, self.clock()))
        logger.info("added %s", image_url)

    def delete(self, image_url: Any) -> None:
        with self._lock:
            self._commit(mutator.delete(self._slides, self._state, image_url, self.clock()))
        logger.info("removed %s", image_url)

    def update(self, image_url: Any = None, duration_secs: Any = None) -> None:
        with self._lock:
            result = mutator.update(
                self._slides,
                self._state,
                self.clock(),
                image_url=image_url,
                duration_secs=duration_secs,
            )
            # update() has validated the duration by now
            self._commit(result, None if duration_secs is None else float(duration_secs))
        if duration_secs is not None:
            logger.info("duration set to %ss", duration_secs)
        if image_url is not None:
            logger.info("jumped to %s", image_url)

    def insert_at(self, index: Any, image_url: Any) -> None:
        with self._lock:
            entry = mutator.make_entry(image_url, self._duration)
            self._commit(mutator.insert_at(self._slides, self._state, index, entry, self.clock()))
        logger.info("inserted %s at %s", image_url, index)

    def remove_at(self, index: Any) -> None:
        with self._lock:
            self._commit(mutator.remove_at(self._slides, self._state, index, self.clock()))
        logger.info("removed slide %s", index)

    def replace_at(self, index: Any, image_url: Any) -> None:
        with self._lock:
            entry = mutator.make_entry(image_url, self._duration)
            self._commit(mutator.replace_at(self._slides, self._state, index, entry, self.clock()))
        logger.info("replaced slide %s with %s", index, image_url)

    def reorder(self, image_urls: Any) -> None:
        with self._lock:
            self._commit(mutator.reorder(self._slides, self._state, image_urls))
        logger.info("reordered slides")

    def replace_all(self, image_urls: Any, duration_secs: Any = None) -> None:
        with self._lock:
            if duration_secs is None:
                duration_secs = self._duration
            slides, state = mutator.replace_all(image_urls, duration_secs, self.clock())
            self._commit((slides, state), float(duration_secs))
        logger.info("replaced rotation with %d slides", len(slides))

    def _commit(self, result: mutator.Result, duration_secs: float | None = None) -> None:
        # disk first, then memory
        slides, state = result
        if duration_secs is None:
            duration_secs = self._duration
        self.store.save(slides, duration_secs)
        self._slides = slides
        self._state = state
        self._duration = duration_secs
