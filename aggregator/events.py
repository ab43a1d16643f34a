"""Domain event sinks."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from aggregator.routing.types import SwapEvent


class EventSink(Protocol):
    """Receives one SwapEvent per successful swap."""

    def emit(self, event: SwapEvent) -> None: ...


class EventLog:
    """In-memory event sink that keeps every event in emission order."""

    def __init__(self) -> None:
        self._events: list[SwapEvent] = []

    def emit(self, event: SwapEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[SwapEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[SwapEvent]:
        return iter(list(self._events))


__all__ = ["EventLog", "EventSink"]
