import uuid

import grpc
import pytest

from application.services.route_guide_service import RouteGuideApplicationService
from domain.route_guide import FeatureRepository
from grpc_app.generated import route_guide_pb2, route_guide_pb2_grpc
from grpc_app.interceptors.exceptions import ExceptionMappingInterceptor, business_code_to_grpc_status
from grpc_app.interceptors.request_id import RequestIdInterceptor
from grpc_app.server import create_server
from infrastructure.realtime.route_chat_relay import InMemoryRouteChatRelay
from shared.codes import BusinessCode


def _trailers(md) -> dict:
    return dict(list(md or ()))


class BrokenRepository(FeatureRepository):
    def load(self, features):
        pass

    def all(self):
        raise RuntimeError("disk on fire")

    def find_by_location(self, point):
        raise RuntimeError("disk on fire")


def test_business_code_mapping():
    assert business_code_to_grpc_status(BusinessCode.PARAM_VALIDATION_ERROR) == grpc.StatusCode.INVALID_ARGUMENT
    assert business_code_to_grpc_status(BusinessCode.DATA_LOAD_ERROR) == grpc.StatusCode.INTERNAL
    assert business_code_to_grpc_status(BusinessCode.SYSTEM_ERROR) == grpc.StatusCode.INTERNAL
    assert business_code_to_grpc_status(99999) == grpc.StatusCode.FAILED_PRECONDITION


@pytest.fixture
async def broken_target():
    svc = RouteGuideApplicationService(repository=BrokenRepository(), relay=InMemoryRouteChatRelay())
    server, port = await create_server(svc=svc, address="127.0.0.1:0")
    await server.start()
    try:
        yield f"127.0.0.1:{port}"
    finally:
        await server.stop(grace=None)


async def test_unexpected_error_is_internal_without_leaking_details(broken_target):
    async with grpc.aio.insecure_channel(broken_target) as channel:
        stub = route_guide_pb2_grpc.RouteGuideStub(channel)
        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await stub.GetFeature(route_guide_pb2.Point(latitude=1, longitude=1))
    assert ei.value.code() == grpc.StatusCode.INTERNAL
    assert "disk on fire" not in (ei.value.details() or "")
    trailers = _trailers(ei.value.trailing_metadata())
    assert trailers["x-biz-code"] == str(int(BusinessCode.SYSTEM_ERROR))
    assert trailers["x-error-type"] == "SystemError"


async def test_unexpected_error_in_client_stream_is_internal(broken_target):
    async with grpc.aio.insecure_channel(broken_target) as channel:
        stub = route_guide_pb2_grpc.RouteGuideStub(channel)
        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await stub.RecordRoute(iter([route_guide_pb2.Point(latitude=1, longitude=1)]))
    assert ei.value.code() == grpc.StatusCode.INTERNAL


class HalfwayServicer(route_guide_pb2_grpc.RouteGuideServicer):
    async def ListFeatures(self, request, context):  # type: ignore[override]
        yield route_guide_pb2.Feature(name="one", location=request.lo)
        raise KeyError("gone")

    async def RouteChat(self, request_iterator, context):  # type: ignore[override]
        async for note in request_iterator:
            yield note
            raise ValueError("boom")


@pytest.fixture
async def halfway_target():
    server = grpc.aio.server(interceptors=[RequestIdInterceptor(), ExceptionMappingInterceptor()])
    route_guide_pb2_grpc.add_RouteGuideServicer_to_server(HalfwayServicer(), server)
    port = server.add_insecure_port("127.0.0.1:0")
    await server.start()
    try:
        yield f"127.0.0.1:{port}"
    finally:
        await server.stop(grace=None)


async def test_server_stream_error_after_first_item(halfway_target):
    received = []
    async with grpc.aio.insecure_channel(halfway_target) as channel:
        stub = route_guide_pb2_grpc.RouteGuideStub(channel)
        rect = route_guide_pb2.Rectangle(lo=route_guide_pb2.Point(latitude=3, longitude=4))
        with pytest.raises(grpc.aio.AioRpcError) as ei:
            async for feature in stub.ListFeatures(rect):
                received.append(feature.name)
    assert received == ["one"]
    assert ei.value.code() == grpc.StatusCode.INTERNAL


async def test_bidi_stream_error_keeps_generated_request_id(halfway_target):
    async with grpc.aio.insecure_channel(halfway_target) as channel:
        stub = route_guide_pb2_grpc.RouteGuideStub(channel)
        note = route_guide_pb2.RouteNote(location=route_guide_pb2.Point(latitude=1, longitude=1), message="hi")
        call = stub.RouteChat(iter([note]))
        with pytest.raises(grpc.aio.AioRpcError) as ei:
            async for _ in call:
                pass
    assert ei.value.code() == grpc.StatusCode.INTERNAL
    request_id = _trailers(ei.value.trailing_metadata())["x-request-id"]
    assert uuid.UUID(request_id)
