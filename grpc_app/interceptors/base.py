from __future__ import annotations

import inspect
from typing import Any, AsyncIterator, Callable, Optional

import grpc


def rewrap_handler(
    handler: grpc.RpcMethodHandler,
    *,
    unary_unary: Optional[Callable[..., Any]] = None,
    unary_stream: Optional[Callable[..., Any]] = None,
    stream_unary: Optional[Callable[..., Any]] = None,
    stream_stream: Optional[Callable[..., Any]] = None,
) -> grpc.RpcMethodHandler:
    """Rebuild `handler` around the wrapper matching its call kind.

    unary-unary: 单请求 → 单响应
    unary-stream: 单请求 → 流式响应（服务端流）
    stream-unary: 流式请求 → 单响应（客户端流）
    stream-stream: 流式请求 → 流式响应（双向流）

    Kinds without a wrapper keep the original handler.
    """
    kwargs = dict(
        request_deserializer=handler.request_deserializer,
        response_serializer=handler.response_serializer,
    )
    if handler.unary_unary and unary_unary is not None:
        return grpc.unary_unary_rpc_method_handler(unary_unary, **kwargs)
    if handler.unary_stream and unary_stream is not None:
        return grpc.unary_stream_rpc_method_handler(unary_stream, **kwargs)
    if handler.stream_unary and stream_unary is not None:
        return grpc.stream_unary_rpc_method_handler(stream_unary, **kwargs)
    if handler.stream_stream and stream_stream is not None:
        return grpc.stream_stream_rpc_method_handler(stream_stream, **kwargs)
    return handler


async def iterate_responses(result: Any) -> AsyncIterator[Any]:
    """Yield from a streaming handler's result.

    Async-generator handlers are iterated; reader/writer-style handlers
    (coroutines calling `context.write`) are awaited and yield nothing here.
    """
    if inspect.isasyncgen(result):
        async for response in result:
            yield response
    else:
        await result
