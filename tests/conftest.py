from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from smart_display.main import create_app
from smart_display.models import SlideEntry
from smart_display.service import SlideshowService
from smart_display.storage import ConfigStore

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class ManualClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now

    def set(self, seconds_after_t0: float) -> datetime:
        self.now = T0 + timedelta(seconds=seconds_after_t0)
        return self.now


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def slides(*pairs: tuple[str, float]) -> tuple[SlideEntry, ...]:
    return tuple(SlideEntry.of(url, float(d)) for url, d in pairs)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(tmp_path) -> ConfigStore:
    return ConfigStore(tmp_path / "smart-display.json")


@pytest.fixture
def slideshow(store, clock) -> SlideshowService:
    store.save(slides(("http://img/a.jpg", 10), ("http://img/b.jpg", 10)))
    return SlideshowService(store, clock=clock, default_duration_secs=30)


@pytest.fixture
def client(slideshow) -> TestClient:
    return TestClient(create_app(slideshow))
