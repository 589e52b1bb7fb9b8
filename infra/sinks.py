from __future__ import annotations
import json
import logging
from datetime import datetime, timezone

from domain.models import AlarmEvent, TickReport
from domain.ports import EventSink, ReportSink

from .serialization import event_to_json

logger = logging.getLogger(__name__)


class LogReportSink(ReportSink):
    def handle(self, report: TickReport) -> None:
        stamp = datetime.fromtimestamp(report.started_epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")

        logger.info(
            "[%s] tick=%d devices=%d sent=%d failed=%d elapsed=%.3fs",
            stamp,
            report.tick,
            len(report.results),
            report.sent,
            report.failed,
            report.elapsed_sec,
        )
        if report.failed:
            failed_ids = [r.device_id for r in report.results if not r.ok]
            logger.info("tick=%d failed devices: %s", report.tick, failed_ids)


class LogEventSink(EventSink):
    """Dry-run: nada sai do processo, o envelope só vai para o log."""

    def __init__(self) -> None:
        self.total_published = 0

    def publish(self, event: AlarmEvent) -> None:
        self.total_published += 1
        logger.info("dry-run event: %s", json.dumps([event_to_json(event)]))
