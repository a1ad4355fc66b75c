"""Top-level screen selection."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from app.schemas.view import ViewType

logger = logging.getLogger(__name__)

Listener = Callable[[ViewType], Awaitable[None]]


class ViewStateController:
    """Flat state machine over ``ViewType``; every transition is allowed.

    The admin screen is never blocked here. It gates its own content on the
    admin session and shows a login prompt while inactive.
    """

    def __init__(self, initial: ViewType = ViewType.REQUEST):
        self.active = initial
        self._listeners: list[Listener] = []

    def on_enter(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def navigate(self, view: ViewType | str) -> ViewType:
        view = ViewType(view)  # ValueError for unknown names
        if view != self.active:
            logger.debug("View %s -> %s", self.active.value, view.value)
        self.active = view
        for listener in self._listeners:
            await listener(view)
        return view
