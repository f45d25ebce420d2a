from __future__ import annotations

import uuid
import contextvars
from contextlib import contextmanager
from typing import Callable, Awaitable, Iterator

import grpc

from grpc_app.interceptors.base import iterate_responses, rewrap_handler


REQUEST_ID_META_KEY = "x-request-id"
_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("grpc_request_id", default=None)


def get_request_id() -> str | None:
    return _request_id_var.get()


class RequestIdInterceptor(grpc.aio.ServerInterceptor):
    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None:
            return handler

        md = dict(handler_call_details.invocation_metadata or [])

        @contextmanager
        def _bound(context: grpc.aio.ServicerContext) -> Iterator[str]:
            # Reuse the caller's request-id when present
            request_id = md.get(REQUEST_ID_META_KEY) or str(uuid.uuid4())
            # Attach as trailing metadata so the client can correlate
            try:
                context.set_trailing_metadata(((REQUEST_ID_META_KEY, request_id),))
            except Exception:
                pass
            token = _request_id_var.set(request_id)
            try:
                yield request_id
            finally:
                _request_id_var.reset(token)

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            with _bound(context):
                return await handler.unary_unary(request, context)

        async def _unary_stream(request, context: grpc.aio.ServicerContext):
            with _bound(context):
                async for response in iterate_responses(handler.unary_stream(request, context)):
                    yield response

        async def _stream_unary(request_iterator, context: grpc.aio.ServicerContext):
            with _bound(context):
                return await handler.stream_unary(request_iterator, context)

        async def _stream_stream(request_iterator, context: grpc.aio.ServicerContext):
            with _bound(context):
                async for response in iterate_responses(handler.stream_stream(request_iterator, context)):
                    yield response

        return rewrap_handler(
            handler,
            unary_unary=_unary_unary,
            unary_stream=_unary_stream,
            stream_unary=_stream_unary,
            stream_stream=_stream_stream,
        )
