from __future__ import annotations

from typing import Any


class ServiceError(RuntimeError):
    """Base error for service-layer failures that map to HTTP responses."""

    status_code: int = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class InvalidRequestError(ServiceError):
    status_code = 400


class SessionNotFoundError(ServiceError):
    status_code = 404


class NodeNotFoundError(ServiceError):
    status_code = 404


class RoleNotFoundError(ServiceError):
    status_code = 404


class GraphIntegrityError(ServiceError):
    status_code = 409


class XmlParseError(ServiceError):
    """Model output could not be parsed as XML-like markup."""

    status_code = 422

    def __init__(self, message: str, *, text: str, position: tuple[int, int] | None = None) -> None:
        self.text = text
        self.position = position
        super().__init__(message)


class ShapeValidationError(ServiceError):
    """A normalized value does not match the expected response shape."""

    status_code = 422

    def __init__(self, path: str, received: Any, reason: str | None = None) -> None:
        self.path = path
        self.received = received
        self.reason = reason
        detail = f"invalid value at '{path or '<root>'}'"
        if reason:
            detail += f": {reason}"
        super().__init__(f"{detail} (received {received!r:.200})")


class StructuralDepthError(ShapeValidationError):
    pass


class LLMCallError(ServiceError):
    status_code = 502
