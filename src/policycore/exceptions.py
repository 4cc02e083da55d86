"""Unified exception hierarchy for policycore.

All errors raised by the engine inherit from PolicyCoreError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- gRPC status mapping and handler decorator for services embedding the engine
  (needs the optional ``grpc`` extra: ``pip install policycore[grpc]``)

Usage:
    from policycore.exceptions import (
        PolicyCoreError,
        NotFoundError,
        ValidationError,
        grpc_error_handler,
    )

Storage adapters raise NotFoundError / StorageError; builders raise
ValidationError. The evaluation engine itself never raises for valid policies.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "PolicyCoreError",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "AccessDeniedError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # gRPC helpers
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class PolicyCoreError(Exception):
    """Base exception for policycore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "NOT_FOUND").
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


class ConfigurationError(PolicyCoreError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class ValidationError(PolicyCoreError):
    """A builder was asked to produce an invalid statement or policy.

    Carries every violated rule, not just the first one found, so the caller
    can fix all of them before rebuilding.
    """

    code: str = "VALIDATION_ERROR"
    message: str = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        errors: Iterable[str] = (),
        code: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.errors: list[str] = list(errors)
        super().__init__(message, code=code, **kwargs)

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: " + "; ".join(self.errors)


class NotFoundError(PolicyCoreError):
    """A user, role or policy does not exist in the repository."""

    code: str = "NOT_FOUND"
    message: str = "Entity not found"

    def __init__(
        self,
        entity: str = "entity",
        entity_id: str | None = None,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.entity = entity
        self.entity_id = entity_id
        if message is None:
            message = f"{entity} '{entity_id}' not found" if entity_id is not None else f"{entity} not found"
        super().__init__(message, **kwargs)


class StorageError(PolicyCoreError):
    """Repository failure other than a missing entity."""

    code: str = "STORAGE_ERROR"


class AccessDeniedError(PolicyCoreError):
    """Raised by enforcing access checks when no policy grants the request."""

    code: str = "ACCESS_DENIED"
    message: str = "Access denied"


# ---- Error codes --------------------------------------------------------------

_E = TypeVar("_E", bound=type[PolicyCoreError])


class ErrorRegistry:
    """Maps stable error codes to exception classes.

    Lets a client turn an ``error-code`` received over the wire back into
    the matching exception type.
    """

    def __init__(self) -> None:
        self._by_code: dict[str, type[PolicyCoreError]] = {}

    def register(self, code: str, error_cls: type[PolicyCoreError]) -> None:
        if not issubclass(error_cls, PolicyCoreError):
            raise TypeError(f"{error_cls!r} is not a PolicyCoreError")
        self._by_code[code] = error_cls

    def get(self, code: str) -> type[PolicyCoreError] | None:
        return self._by_code.get(code)

    def all(self) -> dict[str, type[PolicyCoreError]]:
        return dict(self._by_code)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Class decorator adding a custom error type to ``error_registry``.

    Usage:
        @register_error("QUOTA_EXCEEDED")
        class QuotaExceededError(StorageError):
            code = "QUOTA_EXCEEDED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


for _cls in (PolicyCoreError, ConfigurationError, ValidationError, NotFoundError, StorageError, AccessDeniedError):
    error_registry.register(_cls.code, _cls)
del _cls


# ---- gRPC mapping -------------------------------------------------------------

# Error code -> grpc.StatusCode attribute name
_GRPC_STATUS_NAMES = {
    "VALIDATION_ERROR": "INVALID_ARGUMENT",
    "NOT_FOUND": "NOT_FOUND",
    "STORAGE_ERROR": "UNAVAILABLE",
    "CONFIGURATION_ERROR": "FAILED_PRECONDITION",
    "ACCESS_DENIED": "PERMISSION_DENIED",
}


def _import_grpc() -> Any:
    # Imported on use so that the engine itself never needs grpcio
    try:
        import grpc
    except ImportError as e:
        raise ConfigurationError(
            "gRPC support requires grpcio: pip install policycore[grpc]"
        ) from e
    return grpc


def get_grpc_status_code(error: PolicyCoreError) -> Any:
    """Map a PolicyCoreError to a ``grpc.StatusCode`` (INTERNAL if unmapped).

    Raises:
        ConfigurationError: grpcio is not installed.
    """
    grpc = _import_grpc()

    return getattr(grpc.StatusCode, _GRPC_STATUS_NAMES.get(error.code, "INTERNAL"))


def grpc_error_handler(method):
    """Decorator for async unary gRPC servicer methods.

    A PolicyCoreError aborts the call with its mapped status, the message
    ``"[CODE] text"`` and an ``error-code`` trailing metadata entry. Any other
    exception is logged with its traceback and aborts with INTERNAL.

    Usage:
        class AuthzServicer(authz_pb2_grpc.AuthzServicer):
            @grpc_error_handler
            async def CheckAccess(self, request, context):
                allowed = await self.access.has_access(request.user_id, request.action, request.resource)
                ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except PolicyCoreError as e:
            detail = f"[{e.code}] {e}"
            logger.error(
                "%s failed: %s",
                method.__name__,
                detail,
                extra={"error_code": e.code, "error_details": e.details},
            )
            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(get_grpc_status_code(e), detail)
        except Exception as e:
            grpc = _import_grpc()

            logger.exception("%s crashed", method.__name__)
            await context.abort(grpc.StatusCode.INTERNAL, f"Unexpected {type(e).__name__}: {e}")
        return None

    return wrapper
