import itertools

import pytest
from hypothesis import HealthCheck, settings

from spurt_stream.config import SegmentationSettings
from spurt_stream.engine import SpurtEngine
from spurt_stream.registry import StreamRegistry
from spurt_stream.replay import VirtualClock

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("default")


@pytest.fixture
def sequential_ids():
    counter = itertools.count()
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def segmentation_settings():
    return SegmentationSettings.from_milliseconds(cut_ms=1000, paragraph_ms=1000)


@pytest.fixture
def registry(segmentation_settings, sequential_ids):
    return StreamRegistry(segmentation_settings, id_factory=sequential_ids)


@pytest.fixture
def engine(segmentation_settings, clock, registry):
    return SpurtEngine(
        segmentation_settings,
        clock=clock,
        timer_factory=clock.timer,
        registry=registry,
    )
