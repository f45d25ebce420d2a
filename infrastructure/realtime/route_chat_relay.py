"""
RouteChatRelayPort 的内存实现

仅限单进程；留言历史在中继的生命周期内一直保留，关闭时清空。
"""
from __future__ import annotations

from typing import Dict, List
import asyncio

from application.ports.route_chat import RouteChatRelayPort
from domain.route_guide import Point, RouteNote


class InMemoryRouteChatRelay(RouteChatRelayPort):
    def __init__(self) -> None:
        self._notes: Dict[Point, List[RouteNote]] = {}
        # 整个映射共用一把锁，临界区内不做 await
        self._lock = asyncio.Lock()

    async def exchange(self, note: RouteNote) -> List[RouteNote]:  # type: ignore[override]
        """原子地取出该坐标已有留言的快照，再追加新留言"""
        async with self._lock:
            notes = self._notes.setdefault(note.location, [])
            previous = list(notes)
            notes.append(note)
        return previous

    async def history(self, location: Point) -> List[RouteNote]:  # type: ignore[override]
        async with self._lock:
            return list(self._notes.get(location, ()))

    async def aclose(self) -> None:  # type: ignore[override]
        async with self._lock:
            self._notes.clear()
