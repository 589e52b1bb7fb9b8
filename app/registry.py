from __future__ import annotations

import random
from typing import Iterator

from domain.errors import ConfigurationError
from domain.geo import sample_coordinate
from domain.models import Device, SampleRange


class DeviceRegistry:
    """
    Frota de tamanho fixo.
    A ordem de inserção é a ordem de publicação em cada tick.
    """

    def __init__(self, devices: list[Device]):
        self._devices = list(devices)
        self._by_id: dict[int, Device] = {d.device_id: d for d in self._devices}

    def __iter__(self) -> Iterator[Device]:
        return iter(self._devices)

    def __len__(self) -> int:
        return len(self._devices)

    def get(self, device_id: int) -> Device | None:
        return self._by_id.get(int(device_id))


def initialize_fleet(
    count: int,
    ranges: SampleRange,
    lat_rng: random.Random,
    long_rng: random.Random,
) -> DeviceRegistry:
    if count <= 0:
        raise ConfigurationError(f"device_count deve ser > 0 (recebido {count}).")

    devices: list[Device] = []
    for i in range(count):
        latitude, longitude = sample_coordinate(ranges, lat_rng, long_rng)
        devices.append(
            Device(
                device_id=i,
                name=f"Alarm {i}",
                latitude=latitude,
                longitude=longitude,
            )
        )
    return DeviceRegistry(devices)
