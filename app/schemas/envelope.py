"""Tagged result type for the ``{success, data|message}`` response envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from app.services.errors import ApiError, TransportError, is_auth_failure

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_FAILURE_MESSAGE = "Request could not be processed."


@dataclass(frozen=True)
class ApiSuccess(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.data

    def map(self, fn: Callable[[T], U]) -> "ApiSuccess[U]":
        return ApiSuccess(fn(self.data))


@dataclass(frozen=True)
class ApiFailure:
    message: str
    transport: bool = False
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_auth_failure(self) -> bool:
        # Transport failures say nothing about the session.
        return not self.transport and is_auth_failure(self.message)

    def unwrap(self):
        if self.transport:
            raise TransportError(self.message, status_code=self.status_code)
        raise ApiError(self.message)

    def map(self, fn: Callable[[Any], Any]) -> "ApiFailure":
        return self


ApiResult = Union[ApiSuccess[T], ApiFailure]


def parse_envelope(body: Any) -> ApiResult[Any]:
    """Turn a decoded response body into a success or failure."""
    if not isinstance(body, dict) or "success" not in body:
        return ApiFailure("Malformed response from repair sheet", transport=True)
    if not body["success"]:
        return ApiFailure(body.get("message") or DEFAULT_FAILURE_MESSAGE)
    return ApiSuccess(body.get("data"))
