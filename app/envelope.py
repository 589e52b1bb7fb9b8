from __future__ import annotations

import uuid
from typing import Callable

from domain.models import AlarmEvent, Device
from domain.ports import Clock


def new_event_id() -> str:
    return str(uuid.uuid4())


def build_event(
    topic: str,
    device: Device,
    clock: Clock,
    id_factory: Callable[[], str] = new_event_id,
) -> AlarmEvent:
    if not topic:
        raise ValueError("build_event: topic vazio.")

    return AlarmEvent(
        topic=topic,
        id=id_factory(),
        event_time=clock.now().isoformat(timespec="microseconds"),
        data=device.snapshot(),
    )
