"""Failures raised by the sheet client and the auth-failure classifier."""

from __future__ import annotations

# The remote returns free-text messages only. These are the phrases its
# auth and session-expiry responses are known to contain; matching is a
# case-sensitive substring test.
AUTH_FAILURE_PHRASES: tuple[str, ...] = ("인증", "세션", "Token")


class SheetClientError(Exception):
    """Base error for calls against the repair sheet endpoint."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(SheetClientError):
    """Non-2xx status, network failure, or a body that is not an envelope."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApiError(SheetClientError):
    """The remote answered with ``success: false``."""

    @property
    def is_auth_failure(self) -> bool:
        return is_auth_failure(self.message)


def is_auth_failure(message: str | None) -> bool:
    """True when an API failure message looks like a rejected or expired session."""
    if not message:
        return False
    return any(phrase in message for phrase in AUTH_FAILURE_PHRASES)
