"""
Route chat port (contracts-first).

The application layer only depends on this protocol; the concrete relay
lives in infrastructure (in-memory for a single process).
"""
from __future__ import annotations

from typing import List, Protocol

from domain.route_guide import Point, RouteNote


class RouteChatRelayPort(Protocol):
    """Shared per-location note history used by every RouteChat call.

    `exchange` must atomically snapshot the notes previously recorded at
    `note.location` and then record `note`; the snapshot is what the caller
    streams back to its own client.
    """

    async def exchange(self, note: RouteNote) -> List[RouteNote]: ...

    async def history(self, location: Point) -> List[RouteNote]: ...

    async def aclose(self) -> None: ...


__all__ = ["RouteChatRelayPort"]
