import asyncio

from domain.route_guide import Point, RouteNote


L = Point(409146138, -746188906)
OTHER = Point(0, 0)


async def test_first_note_at_location_replays_nothing(relay):
    assert await relay.exchange(RouteNote(L, "n1")) == []
    assert await relay.history(L) == [RouteNote(L, "n1")]


async def test_later_notes_replay_history_in_publish_order(relay):
    n1, n2, n3 = RouteNote(L, "n1"), RouteNote(L, "n2"), RouteNote(L, "n3")
    await relay.exchange(n1)
    assert await relay.exchange(n2) == [n1]
    assert await relay.exchange(n3) == [n1, n2]


async def test_locations_are_independent(relay):
    await relay.exchange(RouteNote(L, "here"))
    assert await relay.exchange(RouteNote(OTHER, "there")) == []


async def test_returned_snapshot_is_not_live(relay):
    await relay.exchange(RouteNote(L, "n1"))
    snapshot = await relay.exchange(RouteNote(L, "n2"))
    await relay.exchange(RouteNote(L, "n3"))
    assert snapshot == [RouteNote(L, "n1")]


async def test_concurrent_exchanges_lose_no_updates(relay):
    notes = [RouteNote(L, f"n{i}") for i in range(50)]
    replays = await asyncio.gather(*(relay.exchange(n) for n in notes))
    history = await relay.history(L)
    assert sorted(n.message for n in history) == sorted(n.message for n in notes)
    # Every exchange saw a strict prefix of the final history
    assert sorted(len(r) for r in replays) == list(range(50))
    for r in replays:
        assert history[: len(r)] == r


async def test_aclose_clears_history(relay):
    await relay.exchange(RouteNote(L, "n1"))
    await relay.aclose()
    assert await relay.history(L) == []
