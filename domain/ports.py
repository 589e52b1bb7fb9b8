from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import AlarmEvent, TickReport


class Clock(Protocol):
    def now_epoch(self) -> float: ...

    def now(self) -> datetime:
        """datetime com tzinfo (offset explícito)."""
        ...


class EventSink(Protocol):
    def publish(self, event: AlarmEvent) -> None:
        """Uma única tentativa. Falha -> PublishError."""
        ...


class ReportSink(Protocol):
    def handle(self, report: TickReport) -> None: ...
