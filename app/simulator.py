from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Callable

from domain.errors import PublishError
from domain.models import AlarmEvent, DeliveryResult, TickReport
from domain.ports import Clock, EventSink, ReportSink

from .envelope import build_event, new_event_id
from .fields import FieldGenerator
from .registry import DeviceRegistry

logger = logging.getLogger(__name__)


class AlarmSimulator:
    """
    Loop de simulação da frota.

    - Um tick = todos os devices, na ordem do registry
    - Por device: regenera campos -> monta envelope -> publica (1 tentativa)
    - Falha de publicação é registrada e ignorada; o tick segue
    - Intervalo fixo entre ticks, sem adaptação a latência/falhas
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        fields: FieldGenerator,
        sink: EventSink,
        clock: Clock,
        *,
        topic: str,
        interval_ms: int,
        report_sink: ReportSink | None = None,
        workers: int = 1,
        id_factory: Callable[[], str] = new_event_id,
    ):
        if not topic:
            raise ValueError("AlarmSimulator: topic vazio.")

        self.registry = registry
        self.fields = fields
        self.sink = sink
        self.clock = clock
        self.report_sink = report_sink

        self.topic = topic
        self.interval_ms = int(interval_ms)
        self.workers = max(1, int(workers))
        self._id_factory = id_factory

        self._executor: ThreadPoolExecutor | None = None
        self._tick = 0

    def start(self) -> None:
        if self.workers > 1 and self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="alarm-publish"
            )

    def stop(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    @property
    def ticks(self) -> int:
        return self._tick

    def _publish_one(self, event: AlarmEvent) -> DeliveryResult:
        reading = event.data
        try:
            self.sink.publish(event)
        except PublishError as e:
            logger.warning(
                "Error sending alarm: device=%s status=%s error=%s payload=%s",
                reading.device_id,
                reading.status.value,
                e,
                asdict(event),
            )
            return DeliveryResult(
                device_id=reading.device_id, event_id=event.id, ok=False, error=str(e)
            )
        except Exception as e:
            # qualquer outra falha do sink também fica contida no tick
            logger.error(
                "Error sending alarm: device=%s status=%s error=%r payload=%s",
                reading.device_id,
                reading.status.value,
                e,
                asdict(event),
                exc_info=True,
            )
            return DeliveryResult(
                device_id=reading.device_id,
                event_id=event.id,
                ok=False,
                error=f"{type(e).__name__}: {e}",
            )

        logger.debug(
            "%s alarm sent. Longitude: %s latitude: %s image: %s",
            reading.status.value,
            reading.longitude,
            reading.latitude,
            reading.image,
        )
        return DeliveryResult(device_id=reading.device_id, event_id=event.id, ok=True)

    def _next_event(self, device) -> AlarmEvent:
        self.fields.refresh(device)
        return build_event(self.topic, device, self.clock, self._id_factory)

    def run_tick(self) -> TickReport:
        self._tick += 1
        started = self.clock.now_epoch()

        results: list[DeliveryResult]
        if self._executor is None:
            results = [self._publish_one(self._next_event(d)) for d in self.registry]
        else:
            # mutação de todos os devices antes de qualquer publish em paralelo
            events = [self._next_event(d) for d in self.registry]
            results = list(self._executor.map(self._publish_one, events))

        report = TickReport(
            tick=self._tick,
            started_epoch=started,
            finished_epoch=self.clock.now_epoch(),
            results=results,
        )
        if self.report_sink is not None:
            self.report_sink.handle(report)
        return report

    def run(
        self,
        stop: threading.Event | None = None,
        max_ticks: int | None = None,
    ) -> None:
        """
        Sem stop/max_ticks roda para sempre (até o processo ser encerrado).
        """
        stop = stop or threading.Event()
        interval_sec = self.interval_ms / 1000.0
        done = 0

        while not stop.is_set():
            if max_ticks is not None and done >= max_ticks:
                break
            if done:
                stop.wait(interval_sec)
                if stop.is_set():
                    break
            self.run_tick()
            done += 1
