"""Pytest bootstrap configuration.

Settings are read at import time, so test-wide environment overrides are
applied before any project module is imported.
"""
import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from domain.route_guide import Feature, Point  # noqa: E402


@pytest.fixture
def sample_features() -> list[Feature]:
    """A small store: three named features, one unnamed, one duplicate location."""
    return [
        Feature(name="Patriots Path, Mendham, NJ 07945, USA", location=Point(407838351, -746143763)),
        Feature(name="101 New Jersey 10, Whippany, NJ 07981, USA", location=Point(408122808, -743999179)),
        Feature(name="", location=Point(407113723, -749746483)),
        Feature(name="U.S. 6, Shohola, PA 18458, USA", location=Point(413628156, -749015468)),
        Feature(name="Shadowed duplicate", location=Point(407838351, -746143763)),
    ]


@pytest.fixture
def repository(sample_features):
    from infrastructure.repositories.feature_repository import InMemoryFeatureRepository

    return InMemoryFeatureRepository(sample_features)


@pytest.fixture
def relay():
    from infrastructure.realtime.route_chat_relay import InMemoryRouteChatRelay

    return InMemoryRouteChatRelay()


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_service(repository, relay, clock):
    from application.services.route_guide_service import RouteGuideApplicationService

    return RouteGuideApplicationService(repository=repository, relay=relay, clock=clock)
