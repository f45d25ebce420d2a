from __future__ import annotations

from typing import AsyncIterable, AsyncIterator

import grpc

from application.services.route_guide_service import RouteGuideApplicationService
from domain.route_guide import Point, RouteNote
from grpc_app.generated import route_guide_pb2, route_guide_pb2_grpc
from grpc_app.mappers.route_guide import (
    feature_to_proto,
    point_from_proto,
    rectangle_from_proto,
    route_note_from_proto,
    route_note_to_proto,
    summary_to_proto,
)


async def _points(request_iterator: AsyncIterable[route_guide_pb2.Point]) -> AsyncIterator[Point]:
    async for msg in request_iterator:
        yield point_from_proto(msg)


async def _notes(request_iterator: AsyncIterable[route_guide_pb2.RouteNote]) -> AsyncIterator[RouteNote]:
    async for msg in request_iterator:
        yield route_note_from_proto(msg)


class RouteGuideService(route_guide_pb2_grpc.RouteGuideServicer):
    """Thin adapter: wire messages in, application service, wire messages out."""

    def __init__(self, svc: RouteGuideApplicationService) -> None:
        self._svc = svc

    async def GetFeature(self, request: route_guide_pb2.Point, context: grpc.aio.ServicerContext) -> route_guide_pb2.Feature:  # type: ignore[override]
        feature = await self._svc.get_feature(point_from_proto(request))
        return feature_to_proto(feature)

    async def ListFeatures(self, request: route_guide_pb2.Rectangle, context: grpc.aio.ServicerContext) -> AsyncIterator[route_guide_pb2.Feature]:  # type: ignore[override]
        async for feature in self._svc.list_features(rectangle_from_proto(request)):
            yield feature_to_proto(feature)

    async def RecordRoute(self, request_iterator: AsyncIterable[route_guide_pb2.Point], context: grpc.aio.ServicerContext) -> route_guide_pb2.RouteSummary:  # type: ignore[override]
        summary = await self._svc.record_route(_points(request_iterator))
        return summary_to_proto(summary)

    async def RouteChat(self, request_iterator: AsyncIterable[route_guide_pb2.RouteNote], context: grpc.aio.ServicerContext) -> AsyncIterator[route_guide_pb2.RouteNote]:  # type: ignore[override]
        async for note in self._svc.route_chat(_notes(request_iterator)):
            yield route_note_to_proto(note)
