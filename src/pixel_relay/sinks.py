"""
Event sinks.

A sink accepts canonical events and consent updates for delivery to the
collection endpoint. Delivery itself (transport, batching, retries) belongs to
the collection client behind the sink; from the relay's side every call is
fire-and-forget.
"""

from __future__ import annotations

import json
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO, Tuple

from pixel_relay.schemas.consent import ConsentSignals
from pixel_relay.schemas.event import CanonicalEvent

CONSENT_UPDATE = "update"


class EventSink(ABC):
    """
    Abstract base class for sinks.

    Subclasses must implement:
        - send_event(): accept one canonical event
        - send_consent(): accept one consent signal record
    """

    @abstractmethod
    def send_event(self, event: CanonicalEvent) -> None:
        pass

    @abstractmethod
    def send_consent(self, signals: ConsentSignals, mode: str = CONSENT_UPDATE) -> None:
        pass

    def close(self) -> None:
        """
        Release any resources held by the sink.

        Override in subclasses that hold resources.
        """
        pass

    def __enter__(self) -> "EventSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@dataclass
class MemorySink(EventSink):
    """Record every call in order. Used for dry runs and tests."""

    events: List[CanonicalEvent] = field(default_factory=list)
    consents: List[Tuple[str, ConsentSignals]] = field(default_factory=list)

    def send_event(self, event: CanonicalEvent) -> None:
        self.events.append(event)

    def send_consent(self, signals: ConsentSignals, mode: str = CONSENT_UPDATE) -> None:
        self.consents.append((mode, signals))

    @property
    def event_names(self) -> List[str]:
        return [event.name for event in self.events]


class JsonLinesSink(EventSink):
    """
    Write one JSON object per call to a text stream.

    Output lines look like::

        {"type": "event", "name": "page_view", "params": {...}}
        {"type": "consent", "mode": "update", "params": {...}}
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _write(self, record: Dict[str, Any]) -> None:
        self.stream.write(json.dumps(record, ensure_ascii=False) + "\n")

    def send_event(self, event: CanonicalEvent) -> None:
        self._write({"type": "event", **event.to_record()})

    def send_consent(self, signals: ConsentSignals, mode: str = CONSENT_UPDATE) -> None:
        self._write({"type": "consent", "mode": mode, "params": signals.to_params()})

    def close(self) -> None:
        self.stream.flush()
