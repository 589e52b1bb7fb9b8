from __future__ import annotations

import random

from domain.errors import ConfigurationError
from domain.models import Device, Status


def sample_status(rng: random.Random, weight: int) -> Status:
    # 1/weight de chance de alerta; o resto cai no status padrão
    if weight < 1:
        raise ConfigurationError(f"status_weight deve ser >= 1 (recebido {weight}).")
    if rng.randrange(weight) == 0:
        return Status.ALERT
    return Status.DEFAULT


def sample_image_pointer(rng: random.Random, true_image: str, false_image: str) -> str:
    if rng.randrange(2) == 0:
        return true_image
    return false_image


def compose_summary_text(status: Status, image: str) -> str:
    return f"{status.value} alert image: {image}"


class FieldGenerator:
    """
    Gera os campos mutáveis (status, image, text) de um device por tick.
    Não toca em id, nome ou localização.
    """

    def __init__(
        self,
        status_rng: random.Random,
        image_rng: random.Random,
        *,
        weight: int,
        true_image: str,
        false_image: str,
    ):
        if weight < 1:
            raise ConfigurationError(f"status_weight deve ser >= 1 (recebido {weight}).")
        self._status_rng = status_rng
        self._image_rng = image_rng
        self.weight = int(weight)
        self.true_image = true_image
        self.false_image = false_image

    def refresh(self, device: Device) -> None:
        status = sample_status(self._status_rng, self.weight)
        image = sample_image_pointer(self._image_rng, self.true_image, self.false_image)

        device.status = status
        device.image = image
        device.text = compose_summary_text(status, image)
