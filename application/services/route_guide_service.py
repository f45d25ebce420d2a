"""
路线指南应用服务（application/services）- 编排特征库、几何计算与留言中继
"""
from __future__ import annotations

import time
from typing import AsyncIterable, AsyncIterator, Callable

from application.ports.route_chat import RouteChatRelayPort
from core.logging_config import get_logger
from domain.route_guide import (
    Feature,
    FeatureRepository,
    Point,
    Rectangle,
    RouteNote,
    RouteRecorder,
    RouteSummary,
)
from domain.route_guide.geometry import validate_point, validate_rectangle


logger = get_logger(__name__)


class RouteGuideApplicationService:
    """路线指南应用服务 - 四种调用形态的业务实现，与传输层无关

    - get_feature: 单请求 -> 单响应
    - list_features: 单请求 -> 流式响应
    - record_route: 流式请求 -> 单响应
    - route_chat: 流式请求 -> 流式响应

    服务本身不做重试；校验失败立即抛出 InvalidCoordinateException 结束调用。
    """

    def __init__(
        self,
        repository: FeatureRepository,
        relay: RouteChatRelayPort,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._repository = repository
        self._relay = relay
        self._clock = clock

    async def get_feature(self, point: Point) -> Feature:
        validate_point(point)
        return self._repository.get_feature(point)

    async def list_features(self, rect: Rectangle) -> AsyncIterator[Feature]:
        """按特征库顺序逐个产出；调用方取消时生成器在下一次 yield 处终止"""
        validate_rectangle(rect)
        for feature in self._repository.list_features(rect):
            yield feature

    async def record_route(self, points: AsyncIterable[Point]) -> RouteSummary:
        recorder = RouteRecorder(clock=self._clock)
        async for point in points:
            validate_point(point, field=f"points[{recorder.point_count}]")
            recorder.record(point, self._repository.get_feature(point))
        summary = recorder.summarize()
        logger.info(
            "route_recorded",
            point_count=summary.point_count,
            feature_count=summary.feature_count,
            distance=summary.distance,
            elapsed_time=summary.elapsed_time,
        )
        return summary

    async def route_chat(self, notes: AsyncIterable[RouteNote]) -> AsyncIterator[RouteNote]:
        """每收到一条留言，先回放该坐标上已有的留言（中继处理顺序），再记录新留言"""
        async for note in notes:
            validate_point(note.location, field="note.location")
            previous = await self._relay.exchange(note)
            logger.debug(
                "route_note_relayed",
                latitude=note.location.latitude,
                longitude=note.location.longitude,
                replayed=len(previous),
            )
            for prior in previous:
                yield prior

    async def aclose(self) -> None:
        """关闭时释放留言中继（清空各坐标的留言历史）"""
        await self._relay.aclose()
