"""
Minimal DOM for server-side overlay rendering.

Provides just what the adapter needs from a document: element creation,
lookup by id, child removal, click listeners that return a disposer, and
HTML serialization.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator
from html import escape
from typing import Any

EventHandler = Callable[["Event"], Awaitable[Any] | Any]


class Event:
    """A dispatched DOM event."""

    def __init__(self, event_type: str) -> None:
        self.type = event_type
        self.target: Element | None = None
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class Element:
    """A node in the in-memory document tree."""

    def __init__(self, tag: str, owner: "Document | None" = None) -> None:
        self.tag = tag
        self.owner = owner
        self.id: str | None = None
        self.class_name = ""
        self.text_content = ""
        self.attributes: dict[str, str] = {}
        self.children: list[Element] = []
        self.parent: Element | None = None
        self._listeners: dict[str, list[EventHandler]] = {}

    def __repr__(self) -> str:
        return f"<Element {self.tag} id={self.id!r} class={self.class_name!r}>"

    @property
    def class_list(self) -> list[str]:
        return self.class_name.split()

    def append_child(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: "Element") -> "Element":
        self.children.remove(child)
        child.parent = None
        return child

    def add_event_listener(self, event_type: str, handler: EventHandler) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def remove_event_listener(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    async def dispatch_event(self, event: Event) -> Event:
        """Run every handler for the event, awaiting async handlers in order."""
        event.target = self
        for handler in list(self._listeners.get(event.type, [])):
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        return event

    async def click(self) -> Event:
        return await self.dispatch_event(Event("click"))

    def iter_descendants(self) -> Iterator["Element"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find_by_class(self, class_name: str) -> "Element | None":
        for element in self.iter_descendants():
            if class_name in element.class_list:
                return element
        return None

    @property
    def inner_html(self) -> str:
        return "".join(child.to_html() for child in self.children)

    def to_html(self) -> str:
        attrs = dict(self.attributes)
        if self.id:
            attrs["id"] = self.id
        if self.class_name:
            attrs["class"] = self.class_name
        rendered_attrs = "".join(
            f' {name}="{escape(value, quote=True)}"' for name, value in attrs.items()
        )
        body = escape(self.text_content, quote=False) + self.inner_html
        return f"<{self.tag}{rendered_attrs}>{body}</{self.tag}>"


class Document:
    """An in-memory document with a head and a body."""

    def __init__(self) -> None:
        self.head = Element("head", owner=self)
        self.body = Element("body", owner=self)
        self.installed_styles: dict[str, Element] = {}

    def create_element(self, tag: str) -> Element:
        return Element(tag, owner=self)

    def get_element_by_id(self, element_id: str) -> Element | None:
        for root in (self.head, self.body):
            if root.id == element_id:
                return root
            for element in root.iter_descendants():
                if element.id == element_id:
                    return element
        return None


def listen(element: Element, event_type: str, handler: EventHandler) -> Callable[[], None]:
    """Attach a listener and return a function that detaches it."""
    element.add_event_listener(event_type, handler)

    def unlisten() -> None:
        element.remove_event_listener(event_type, handler)

    return unlisten


def remove_children(element: Element) -> None:
    for child in list(element.children):
        element.remove_child(child)
