"""Page elements the host code can bind login state to."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from guahh_auth.web.managers.broadcaster import WebSocketBroadcaster


logger = logging.getLogger("GuahhAuth")


@dataclass
class Element:
    """Server-side state of one element on the page."""

    id: str
    tag: str = "DIV"
    text: str = ""
    src: str | None = None
    background_image: str | None = None
    display: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tag": self.tag,
            "text": self.text,
            "src": self.src,
            "background_image": self.background_image,
            "display": self.display,
        }


class ElementRegistry:
    """Tracks page elements by ID and pushes their changes to the clients.

    Elements are registered either by the host code or by browser clients
    announcing the IDs present on their page.
    """

    def __init__(self, broadcaster: WebSocketBroadcaster):
        self._broadcaster = broadcaster
        self._elements: dict[str, Element] = {}
        self._click_handlers: dict[str, list[abc.Callable[[], Any]]] = {}

    def register(self, element_id: str, tag: str = "DIV") -> Element:
        element = self._elements.get(element_id)
        if element is None:
            element = Element(element_id, tag.upper())
            self._elements[element_id] = element
        else:
            element.tag = tag.upper()
        return element

    def get(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def update(self, element: Element):
        """Broadcast the element's current state."""
        asyncio.create_task(self._broadcaster.emit("element_update", element.to_dict()))

    def add_click_handler(self, element_id: str, handler: abc.Callable[[], Any]) -> bool:
        if element_id not in self._elements:
            return False
        self._click_handlers.setdefault(element_id, []).append(handler)
        return True

    async def click(self, element_id: str) -> bool:
        """Run the click handlers of an element, in the order they were added."""
        if element_id not in self._elements:
            logger.debug(f"Click on unknown element {element_id!r}")
            return False
        for handler in list(self._click_handlers.get(element_id, [])):
            result = handler()
            if inspect.isawaitable(result):
                await result
        return True

    def snapshot(self) -> list[dict[str, Any]]:
        return [element.to_dict() for element in self._elements.values()]
