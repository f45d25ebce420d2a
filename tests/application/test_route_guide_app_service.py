import pytest

from domain.common.exceptions import InvalidCoordinateException
from domain.route_guide import Feature, Point, Rectangle, RouteNote, RouteSummary
from domain.route_guide.geometry import MAX_LATITUDE, distance


async def _aiter(items):
    for item in items:
        yield item


async def _collect(agen):
    return [x async for x in agen]


WHIPPANY = Point(408122808, -743999179)
SHOHOLA = Point(413628156, -749015468)
L = Point(409146138, -746188906)


async def test_get_feature_known_and_unknown(app_service):
    assert (await app_service.get_feature(WHIPPANY)).name.startswith("101 New Jersey 10")
    assert await app_service.get_feature(Point(5, 5)) == Feature("", Point(5, 5))


async def test_get_feature_rejects_out_of_range(app_service):
    with pytest.raises(InvalidCoordinateException):
        await app_service.get_feature(Point(MAX_LATITUDE + 1, 0))


async def test_list_features_streams_named_features(app_service):
    rect = Rectangle(lo=Point(400000000, -750000000), hi=Point(420000000, -730000000))
    features = await _collect(app_service.list_features(rect))
    assert features and all(f.is_named for f in features)


async def test_list_features_validates_before_yielding(app_service):
    rect = Rectangle(lo=Point(0, 0), hi=Point(-MAX_LATITUDE - 1, 0))
    with pytest.raises(InvalidCoordinateException):
        await _collect(app_service.list_features(rect))


async def test_list_features_can_be_abandoned_midway(app_service):
    rect = Rectangle(lo=Point(400000000, -750000000), hi=Point(420000000, -730000000))
    agen = app_service.list_features(rect)
    first = await agen.__anext__()
    await agen.aclose()
    assert first.is_named
    with pytest.raises(StopAsyncIteration):
        await agen.__anext__()


async def test_record_route_zero_points(app_service):
    assert await app_service.record_route(_aiter([])) == RouteSummary(0, 0, 0, 0)


async def test_record_route_counts_features_and_distance(app_service, clock):
    async def points():
        yield WHIPPANY
        clock.advance(12)
        yield Point(1, 1)
        clock.advance(3)
        yield SHOHOLA

    summary = await app_service.record_route(points())
    assert summary.point_count == 3
    assert summary.feature_count == 2
    assert summary.distance == round(distance(WHIPPANY, Point(1, 1)) + distance(Point(1, 1), SHOHOLA))
    assert summary.elapsed_time == 15


async def test_record_route_fails_fast_on_invalid_point(app_service):
    consumed = []

    async def points():
        for p in (WHIPPANY, Point(0, 1800000001), SHOHOLA):
            consumed.append(p)
            yield p

    with pytest.raises(InvalidCoordinateException) as ei:
        await app_service.record_route(points())
    assert ei.value.field == "points[1]"
    assert consumed == [WHIPPANY, Point(0, 1800000001)]


async def test_route_chat_replays_previous_notes_per_location(app_service):
    n1, n2 = RouteNote(L, "first"), RouteNote(L, "second")
    elsewhere = RouteNote(Point(0, 0), "elsewhere")
    assert await _collect(app_service.route_chat(_aiter([n1, elsewhere, n2]))) == [n1]


async def test_route_chat_history_is_shared_across_calls(app_service):
    n1, n2, n3 = RouteNote(L, "a:n1"), RouteNote(L, "b:n2"), RouteNote(L, "c:n3")
    assert await _collect(app_service.route_chat(_aiter([n1]))) == []
    assert await _collect(app_service.route_chat(_aiter([n2]))) == [n1]
    assert await _collect(app_service.route_chat(_aiter([n3]))) == [n1, n2]


async def test_route_chat_rejects_invalid_location(app_service, relay):
    bad = RouteNote(Point(MAX_LATITUDE + 1, 0), "lost")
    with pytest.raises(InvalidCoordinateException):
        await _collect(app_service.route_chat(_aiter([bad])))
    assert await relay.history(bad.location) == []


async def test_aclose_releases_chat_history(app_service, relay):
    await _collect(app_service.route_chat(_aiter([RouteNote(L, "before shutdown")])))
    assert await relay.history(L) == [RouteNote(L, "before shutdown")]

    await app_service.aclose()
    assert await relay.history(L) == []
