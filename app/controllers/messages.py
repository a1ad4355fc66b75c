"""Transient success/error notices that dismiss themselves after a TTL."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from pydantic import ValidationError


def validation_message(e: ValidationError) -> str:
    """First human-readable error from a pydantic validation failure."""
    errors = e.errors()
    if not errors:
        return str(e)
    first = errors[0]
    msg = first.get("msg", "invalid value")
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {msg}" if loc else msg


@dataclass
class FlashMessage:
    kind: str  # success | error
    text: str
    expires_at: float

    def to_dict(self) -> dict:
        return {"type": self.kind, "text": self.text}


class FlashSlot:
    """Holds at most one message; reading it after expiry yields None."""

    def __init__(self, ttl: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._message: FlashMessage | None = None

    def show(self, kind: str, text: str) -> None:
        self._message = FlashMessage(kind, text, self._clock() + self.ttl)

    def success(self, text: str) -> None:
        self.show("success", text)

    def error(self, text: str) -> None:
        self.show("error", text)

    def clear(self) -> None:
        self._message = None

    @property
    def current(self) -> FlashMessage | None:
        if self._message and self._clock() >= self._message.expires_at:
            self._message = None
        return self._message
