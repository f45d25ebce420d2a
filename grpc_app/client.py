"""
RouteGuide gRPC 客户端

提供四种调用形态的异步封装：
- 请求 ID 透传（x-request-id）
- 超时控制
- 一元调用在 UNAVAILABLE 时自动重试（服务端本身从不重试）
"""
from __future__ import annotations

import uuid
from typing import AsyncIterable, AsyncIterator, Iterable, Optional, Union

import grpc
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from core.config import settings
from core.logging_config import get_logger
from domain.route_guide import Feature, Point, Rectangle, RouteNote, RouteSummary
from grpc_app.generated import route_guide_pb2_grpc
from grpc_app.interceptors.request_id import REQUEST_ID_META_KEY
from grpc_app.mappers.route_guide import (
    feature_from_proto,
    point_to_proto,
    rectangle_to_proto,
    route_note_from_proto,
    route_note_to_proto,
    summary_from_proto,
)


logger = get_logger(__name__)

_RETRYABLE = {grpc.StatusCode.UNAVAILABLE}


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, grpc.aio.AioRpcError) and exc.code() in _RETRYABLE


async def _aiter(items: Union[Iterable, AsyncIterable]) -> AsyncIterator:
    if hasattr(items, "__aiter__"):
        async for item in items:  # type: ignore[union-attr]
            yield item
    else:
        for item in items:  # type: ignore[union-attr]
            yield item


class RouteGuideClient:
    """RouteGuide 客户端，可作为异步上下文管理器使用"""

    def __init__(
        self,
        target: Optional[str] = None,
        *,
        channel: Optional[grpc.aio.Channel] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
    ) -> None:
        self.target = target or settings.client.target
        self._owns_channel = channel is None
        self._channel = channel or grpc.aio.insecure_channel(self.target)
        self._stub = route_guide_pb2_grpc.RouteGuideStub(self._channel)
        self.timeout = timeout if timeout is not None else settings.client.timeout
        self.retry_attempts = retry_attempts or settings.client.retry_attempts

    async def __aenter__(self) -> "RouteGuideClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_channel:
            await self._channel.close()

    @staticmethod
    def _metadata(request_id: Optional[str] = None) -> tuple[tuple[str, str], ...]:
        return ((REQUEST_ID_META_KEY, request_id or str(uuid.uuid4())),)

    async def get_feature(self, point: Point, request_id: Optional[str] = None) -> Feature:
        metadata = self._metadata(request_id)
        async for attempt in AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=0.2, max=2),
            before_sleep=lambda state: logger.warning(
                "grpc_client_retry",
                method="GetFeature",
                attempt=state.attempt_number,
                target=self.target,
            ),
            reraise=True,
        ):
            with attempt:
                reply = await self._stub.GetFeature(
                    point_to_proto(point), timeout=self.timeout, metadata=metadata
                )
        return feature_from_proto(reply)

    async def list_features(self, rect: Rectangle, request_id: Optional[str] = None) -> AsyncIterator[Feature]:
        call = self._stub.ListFeatures(
            rectangle_to_proto(rect), timeout=self.timeout, metadata=self._metadata(request_id)
        )
        try:
            async for msg in call:
                yield feature_from_proto(msg)
        finally:
            # Stop the server-side stream if the consumer leaves early
            call.cancel()

    async def record_route(
        self,
        points: Union[Iterable[Point], AsyncIterable[Point]],
        request_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> RouteSummary:
        async def _requests():
            async for p in _aiter(points):
                yield point_to_proto(p)

        reply = await self._stub.RecordRoute(
            _requests(), timeout=timeout or self.timeout, metadata=self._metadata(request_id)
        )
        return summary_from_proto(reply)

    async def route_chat(
        self,
        notes: Union[Iterable[RouteNote], AsyncIterable[RouteNote]],
        request_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AsyncIterator[RouteNote]:
        async def _requests():
            async for n in _aiter(notes):
                yield route_note_to_proto(n)

        call = self._stub.RouteChat(
            _requests(), timeout=timeout or self.timeout, metadata=self._metadata(request_id)
        )
        try:
            async for msg in call:
                yield route_note_from_proto(msg)
        finally:
            call.cancel()
