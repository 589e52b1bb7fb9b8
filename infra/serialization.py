from __future__ import annotations
from typing import Any

from domain.models import AlarmEvent


def event_to_json(event: AlarmEvent) -> dict[str, Any]:
    """Envelope no formato do Event Grid (chaves camelCase)."""
    d = event.data
    return {
        "topic": event.topic,
        "subject": event.subject,
        "id": event.id,
        "eventType": event.event_type,
        "eventTime": event.event_time,
        "data": {
            "deviceId": d.device_id,
            "name": d.name,
            "status": d.status.value,
            "latitude": float(d.latitude),
            "longitude": float(d.longitude),
            "image": d.image,
            "text": d.text,
        },
    }
