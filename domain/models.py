from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class BoundingBox:
    max_lat: Decimal
    min_lat: Decimal
    max_long: Decimal
    min_long: Decimal


@dataclass(frozen=True)
class AxisRange:
    integral_min: int
    integral_max: int
    fractional_min: int   # fração escalada (ex.: 0.810382 -> 810382)
    fractional_max: int


@dataclass(frozen=True)
class SampleRange:
    latitude: AxisRange
    longitude: AxisRange


class Status(str, Enum):
    ALERT = "red"
    DEFAULT = "green"


@dataclass(frozen=True)
class DeviceReading:
    """
    Cópia por valor do estado de um Device.
    É o payload do envelope: ticks seguintes não alteram um evento já montado.
    """
    device_id: int
    name: str
    status: Status
    latitude: Decimal
    longitude: Decimal
    image: str
    text: str


@dataclass
class Device:
    device_id: int
    name: str
    latitude: Decimal
    longitude: Decimal

    # mutáveis: reescritos a cada tick
    status: Status = Status.DEFAULT
    image: str = ""
    text: str = ""

    def snapshot(self) -> DeviceReading:
        return DeviceReading(
            device_id=self.device_id,
            name=self.name,
            status=self.status,
            latitude=self.latitude,
            longitude=self.longitude,
            image=self.image,
            text=self.text,
        )


@dataclass(frozen=True)
class AlarmEvent:
    topic: str
    id: str
    event_time: str   # ISO-8601, microssegundos + offset UTC
    data: DeviceReading

    subject: str = "Alarm"
    event_type: str = "recordInserted"


@dataclass(frozen=True)
class DeliveryResult:
    device_id: int
    event_id: str
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class TickReport:
    tick: int
    started_epoch: float
    finished_epoch: float
    results: list[DeliveryResult] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def elapsed_sec(self) -> float:
        return self.finished_epoch - self.started_epoch
