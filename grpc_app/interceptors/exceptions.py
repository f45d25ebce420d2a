from __future__ import annotations

from typing import Callable, Awaitable
import contextvars

import grpc

from core.logging_config import get_logger
from grpc_app.interceptors.base import iterate_responses, rewrap_handler
from grpc_app.interceptors.request_id import get_request_id
from domain.common.exceptions import BusinessException
from shared.codes import BusinessCode


logger = get_logger(__name__)

# Mark that the current request has been mapped to a gRPC status
_mapped_error: contextvars.ContextVar[bool] = contextvars.ContextVar("grpc_mapped_error", default=False)


def set_mapped_error() -> None:
    _mapped_error.set(True)


def is_mapped_error() -> bool:
    return bool(_mapped_error.get())


def business_code_to_grpc_status(code: int) -> grpc.StatusCode:
    try:
        bc = BusinessCode(code)
    except ValueError:
        return grpc.StatusCode.FAILED_PRECONDITION

    mapping = {
        BusinessCode.PARAM_VALIDATION_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
        BusinessCode.PARAM_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
        BusinessCode.PARAM_MISSING: grpc.StatusCode.INVALID_ARGUMENT,
        BusinessCode.PARAM_TYPE_ERROR: grpc.StatusCode.INVALID_ARGUMENT,

        BusinessCode.NOT_FOUND: grpc.StatusCode.NOT_FOUND,

        BusinessCode.SERVICE_UNAVAILABLE: grpc.StatusCode.UNAVAILABLE,
        BusinessCode.NETWORK_ERROR: grpc.StatusCode.UNAVAILABLE,
        BusinessCode.SYSTEM_ERROR: grpc.StatusCode.INTERNAL,
        BusinessCode.DATA_LOAD_ERROR: grpc.StatusCode.INTERNAL,
    }

    return mapping.get(bc, grpc.StatusCode.FAILED_PRECONDITION)


class ExceptionMappingInterceptor(grpc.aio.ServerInterceptor):
    """Map domain exceptions to gRPC statuses for every call kind.

    Business errors abort with the mapped status and their own message;
    anything else becomes INTERNAL with a generic message. Cancellation
    (asyncio.CancelledError) is not an Exception and passes through.
    """

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None:
            return handler

        method = handler_call_details.method

        async def _abort(context: grpc.aio.ServicerContext, exc: Exception) -> None:
            if isinstance(exc, BusinessException):
                code = int(exc.code)
                status = business_code_to_grpc_status(exc.code)
                error_type = exc.error_type or "BusinessError"
                message = exc.message
                details = exc.message
            else:
                code = int(BusinessCode.SYSTEM_ERROR)
                status = grpc.StatusCode.INTERNAL
                error_type = "SystemError"
                message = str(exc)
                details = "Internal server error"
            try:
                # Keep trailers set by outer interceptors (x-request-id)
                existing = tuple(context.trailing_metadata() or ())
                context.set_trailing_metadata(existing + (
                    ("x-biz-code", str(code)),
                    ("x-error-type", error_type),
                ))
            except Exception:
                pass
            set_mapped_error()
            # Concise error log (no stack)
            logger.error(
                "grpc_mapped_error",
                method=method,
                code=str(code),
                status=str(status),
                message=message,
                field=getattr(exc, "field", None),
                request_id=get_request_id(),
            )
            await context.abort(status, details)

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            try:
                return await handler.unary_unary(request, context)
            except (grpc.RpcError, grpc.aio.AbortError):
                raise
            except Exception as exc:
                await _abort(context, exc)

        async def _unary_stream(request, context: grpc.aio.ServicerContext):
            try:
                async for response in iterate_responses(handler.unary_stream(request, context)):
                    yield response
            except (grpc.RpcError, grpc.aio.AbortError):
                raise
            except Exception as exc:
                await _abort(context, exc)

        async def _stream_unary(request_iterator, context: grpc.aio.ServicerContext):
            try:
                return await handler.stream_unary(request_iterator, context)
            except (grpc.RpcError, grpc.aio.AbortError):
                raise
            except Exception as exc:
                await _abort(context, exc)

        async def _stream_stream(request_iterator, context: grpc.aio.ServicerContext):
            try:
                async for response in iterate_responses(handler.stream_stream(request_iterator, context)):
                    yield response
            except (grpc.RpcError, grpc.aio.AbortError):
                raise
            except Exception as exc:
                await _abort(context, exc)

        return rewrap_handler(
            handler,
            unary_unary=_unary_unary,
            unary_stream=_unary_stream,
            stream_unary=_stream_unary,
            stream_stream=_stream_stream,
        )
