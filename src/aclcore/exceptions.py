"""Unified exception hierarchy for aclcore.

Every error raised by the library inherits from AclError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- gRPC status mapping for services that host the library
- A guard that turns raw grant store failures into BackendUnavailableError

Usage:
    from aclcore.exceptions import (
        AclError,
        BackendUnavailableError,
        InvalidPathError,
    )
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterator, TypeVar, cast

__all__ = [
    # Base hierarchy
    "AclError",
    "ConfigurationError",
    "BackendUnavailableError",
    "InvalidPathError",
    "DataIntegrityError",
    "UnknownPathTypeError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # Helpers
    "backend_guard",
    "get_grpc_status_code",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class AclError(Exception):
    """Base exception for aclcore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "INVALID_PATH").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AclError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class BackendUnavailableError(AclError):
    """The grant store could not be reached or failed mid-call."""

    code: str = "BACKEND_UNAVAILABLE"
    message: str = "Grant store is unavailable"


class InvalidPathError(AclError):
    """Path failed length or format validation."""

    code: str = "INVALID_PATH"
    message: str = "Invalid path"


class DataIntegrityError(AclError):
    """A stored permission code could not be decoded."""

    code: str = "DATA_INTEGRITY"
    message: str = "Unrecognized permission code"


class UnknownPathTypeError(AclError):
    """Path is neither a collection nor a data object."""

    code: str = "UNKNOWN_PATH_TYPE"
    message: str = "Path type could not be resolved"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[AclError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[AclError]] = {}

    def register(self, code: str, error_cls: type[AclError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[AclError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[AclError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("QUOTA_EXCEEDED")
        class QuotaExceededError(AclError):
            code = "QUOTA_EXCEEDED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", AclError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("BACKEND_UNAVAILABLE", BackendUnavailableError)
error_registry.register("INVALID_PATH", InvalidPathError)
error_registry.register("DATA_INTEGRITY", DataIntegrityError)
error_registry.register("UNKNOWN_PATH_TYPE", UnknownPathTypeError)


# ---- Backend failures -------------------------------------------------------


@contextlib.contextmanager
def backend_guard(operation: str, **details: Any) -> Iterator[None]:
    """Re-raise any failure of a grant store call as an AclError.

    AclError subclasses raised by the store pass through untouched so that a
    store can report e.g. DataIntegrityError itself. FileNotFoundError means
    the store has no such path and becomes UnknownPathTypeError. Everything
    else, including client library errors such as grpc.RpcError, becomes
    BackendUnavailableError.

    Usage:
        with backend_guard("revoke_grant", path=path):
            store.revoke_grant(principal, path, recursive)
    """
    try:
        yield
    except AclError:
        raise
    except FileNotFoundError as e:
        logger.warning("grant store call %s found no such path: %s", operation, e)
        raise UnknownPathTypeError(
            f"Grant store call '{operation}' found no such path: {e}",
            operation=operation,
            **details,
        ) from e
    except Exception as e:
        logger.error("grant store call %s failed: %s", operation, e)
        raise BackendUnavailableError(
            f"Grant store call '{operation}' failed: {e}",
            operation=operation,
            **details,
        ) from e


# ---- gRPC Status Mapping ----------------------------------------------------


def get_grpc_status_code(error: AclError) -> int:
    """Map AclError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "BACKEND_UNAVAILABLE": grpc.StatusCode.UNAVAILABLE,
        "INVALID_PATH": grpc.StatusCode.INVALID_ARGUMENT,
        "DATA_INTEGRITY": grpc.StatusCode.DATA_LOSS,
        "UNKNOWN_PATH_TYPE": grpc.StatusCode.NOT_FOUND,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)
