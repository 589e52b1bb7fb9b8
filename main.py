from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Any

from config import AppConfig, load_config
from domain.errors import ConfigurationError
from domain.geo import derive_ranges
from app.fields import FieldGenerator
from app.registry import initialize_fleet
from app.simulator import AlarmSimulator
from infra.clock import SystemClock
from infra.http_event_sink import HttpEventSink
from infra.random_streams import RandomStreams
from infra.sinks import LogEventSink, LogReportSink

logger = logging.getLogger("alarmsim")


def _positive_int(s: str) -> int:
    try:
        n = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"inteiro esperado: {s!r}") from e
    if n < 1:
        raise argparse.ArgumentTypeError(f"deve ser >= 1 (recebido {n})")
    return n


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="alarmsim",
        description="Simula uma frota de alarmes e publica eventos em um endpoint Event Grid.",
    )
    # posicionais: endpoint, resource, key, imagens (falsa, verdadeira), intervalo
    p.add_argument("endpoint", nargs="?", help="URL do topic (Event Grid)")
    p.add_argument("topic_resource", nargs="?", help="resource path gravado no campo 'topic'")
    p.add_argument("key", nargs="?", help="chave compartilhada (aeg-sas-key)")
    p.add_argument("false_image_url", nargs="?", help="imagem de alarme falso")
    p.add_argument("true_image_url", nargs="?", help="imagem de alarme verdadeiro")
    p.add_argument("interval_ms", nargs="?", help="ms entre ticks (padrão 5000)")

    p.add_argument("--config", dest="config_path", default=None, help="arquivo YAML de configuração")
    p.add_argument("--device-count", dest="device_count")
    p.add_argument("--status-weight", dest="status_weight")
    p.add_argument("--seed", dest="seed")
    p.add_argument("--max-lat", dest="max_lat")
    p.add_argument("--min-lat", dest="min_lat")
    p.add_argument("--max-long", dest="max_long")
    p.add_argument("--min-long", dest="min_long")
    p.add_argument("--key-header", dest="key_header")
    p.add_argument("--timeout-sec", dest="timeout_sec")
    p.add_argument("--publish-workers", dest="publish_workers")
    p.add_argument("--log-level", dest="log_level")
    p.add_argument("--dry-run", dest="dry_run", action="store_true", default=None,
                   help="não publica; só registra os envelopes no log")
    p.add_argument("--ticks", type=_positive_int, default=None,
                   help="encerra após N ticks (padrão: roda para sempre)")
    return p


def _overrides(ns: argparse.Namespace) -> dict[str, Any]:
    skip = {"config_path", "ticks"}
    return {k: v for k, v in vars(ns).items() if k not in skip and v is not None}


def build_simulator(cfg: AppConfig):
    """Monta simulador + sink a partir da config (sem iniciar nada)."""
    streams = RandomStreams.from_seed(cfg.seed)
    ranges = derive_ranges(cfg.bounding_box)
    registry = initialize_fleet(cfg.device_count, ranges, streams.latitude, streams.longitude)

    fields = FieldGenerator(
        streams.status,
        streams.image,
        weight=cfg.status_weight,
        true_image=cfg.true_image_url,
        false_image=cfg.false_image_url,
    )

    if cfg.dry_run:
        sink = LogEventSink()
    else:
        sink = HttpEventSink(
            cfg.endpoint,
            cfg.key,
            key_header=cfg.key_header,
            timeout_sec=cfg.timeout_sec,
        )

    sim = AlarmSimulator(
        registry,
        fields,
        sink,
        SystemClock(),
        topic=cfg.topic_resource,
        interval_ms=cfg.interval_ms,
        report_sink=LogReportSink(),
        workers=cfg.publish_workers,
    )
    return sim, sink


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        cfg = load_config(ns.config_path, overrides=_overrides(ns))
        sim, sink = build_simulator(cfg)
    except ConfigurationError as e:
        parser.error(str(e))  # exit 2 + usage

    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Alarms will be sent every %dms. devices=%d status_weight=%d dry_run=%s",
        cfg.interval_ms,
        cfg.device_count,
        cfg.status_weight,
        cfg.dry_run,
    )
    for d in sim.registry:
        logger.debug("[fleet] %s id=%d lat=%s long=%s", d.name, d.device_id, d.latitude, d.longitude)

    stop = threading.Event()
    prev_sigterm = signal.signal(signal.SIGTERM, lambda *_: stop.set())

    if isinstance(sink, HttpEventSink):
        sink.start()
    sim.start()
    try:
        sim.run(stop, max_ticks=ns.ticks)
    except KeyboardInterrupt:
        logger.info("Simulator stopped by user")
    finally:
        signal.signal(signal.SIGTERM, prev_sigterm)
        try:
            sim.stop()
        finally:
            if isinstance(sink, HttpEventSink):
                sink.stop()
                logger.info(
                    "published=%d sent=%d failed=%d",
                    sink.total_published, sink.total_sent, sink.total_failed,
                )


if __name__ == "__main__":
    main()
