"""
Shared business codes used across layers (Domain/Application/gRPC).

This package exposes BusinessCode at `shared.codes` so that domain
exceptions and the transport-level status mapping agree on one table.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    NOT_FOUND = 20006  # Reserved: feature absence is an unnamed Feature, not an error

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    DATA_LOAD_ERROR = 40001
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003


__all__ = ["BusinessCode"]
