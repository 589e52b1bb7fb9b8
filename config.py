from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

import httpx
import yaml

from domain.errors import ConfigurationError
from domain.models import BoundingBox

ENV_PREFIX = "ALARMSIM_"

# retângulo cobrindo o grosso da Inglaterra sem cair no mar
# (Blackpool / Hull / Taunton / Mid Sussex)
DEFAULT_BOUNDING_BOX = BoundingBox(
    max_lat=Decimal("53.810382"),
    min_lat=Decimal("51.010299"),
    max_long=Decimal("-0.145569"),
    min_long=Decimal("-3.048706"),
)

_BBOX_FIELDS = ("max_lat", "min_lat", "max_long", "min_long")

_SCALAR_FIELDS = (
    "endpoint",
    "topic_resource",
    "key",
    "key_header",
    "true_image_url",
    "false_image_url",
    "interval_ms",
    "device_count",
    "status_weight",
    "seed",
    "timeout_sec",
    "publish_workers",
    "dry_run",
    "log_level",
)


@dataclass(frozen=True)
class AppConfig:
    topic_resource: str
    true_image_url: str
    false_image_url: str

    endpoint: str = ""
    key: str = ""
    key_header: str = "aeg-sas-key"

    interval_ms: int = 5000
    device_count: int = 20
    status_weight: int = 10
    bounding_box: BoundingBox = field(default=DEFAULT_BOUNDING_BOX)

    seed: int | None = None
    timeout_sec: float = 10.0
    publish_workers: int = 1
    dry_run: bool = False
    log_level: str = "INFO"


def _req(d: Mapping[str, Any], name: str) -> Any:
    v = d.get(name)
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ConfigurationError(f"Config inválida: campo obrigatório '{name}' ausente.")
    return v


def _opt(d: Mapping[str, Any], name: str, default: Any) -> Any:
    v = d.get(name)
    return default if v is None else v


def _to_int(x: Any, name: str) -> int:
    if isinstance(x, bool):
        raise ConfigurationError(f"Config inválida: '{name}' deve ser inteiro (recebido {x!r}).")
    try:
        return int(str(x).strip())
    except ValueError as e:
        raise ConfigurationError(f"Config inválida: '{name}' deve ser inteiro (recebido {x!r}).") from e


def _to_float(x: Any, name: str) -> float:
    try:
        return float(x)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Config inválida: '{name}' deve ser numérico (recebido {x!r}).") from e


def _to_decimal(x: Any, name: str) -> Decimal:
    # str() primeiro: YAML entrega float e Decimal(float) carrega lixo binário
    try:
        d = Decimal(str(x).strip())
    except InvalidOperation as e:
        raise ConfigurationError(f"Config inválida: '{name}' não é um decimal válido (recebido {x!r}).") from e
    if not d.is_finite():
        raise ConfigurationError(f"Config inválida: '{name}' não é um decimal válido (recebido {x!r}).")
    return d


def _to_bool(x: Any, name: str) -> bool:
    if isinstance(x, bool):
        return x
    s = str(x).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off", ""):
        return False
    raise ConfigurationError(f"Config inválida: '{name}' deve ser booleano (recebido {x!r}).")


def _to_endpoint(x: Any, name: str) -> str:
    s = str(x).strip()
    try:
        url = httpx.URL(s)
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise ConfigurationError(f"Config inválida: '{name}' não é uma URL válida (recebido {x!r}): {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Config inválida: '{name}' deve ser uma URL http(s) com host (recebido {x!r}).")
    return s


def _read_yaml(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.is_file():
        raise ConfigurationError(f"Arquivo de configuração não encontrado: {path}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML inválido em {path}: {e}") from e
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config inválida: {path} deve conter um mapa (dict).")
    return dict(data)


def _merge_sources(
    data: dict[str, Any],
    env: Mapping[str, str],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Achata tudo em um dict único. Precedência: YAML < ambiente < CLI.
    """
    merged: dict[str, Any] = {k: data[k] for k in _SCALAR_FIELDS if k in data}

    bbox_raw = data.get("bounding_box")
    if bbox_raw is not None and not isinstance(bbox_raw, Mapping):
        raise ConfigurationError("Config inválida: 'bounding_box' deve ser um mapa (dict).")
    for k in _BBOX_FIELDS:
        if bbox_raw and k in bbox_raw:
            merged[k] = bbox_raw[k]

    for k in _SCALAR_FIELDS + _BBOX_FIELDS:
        v = env.get(ENV_PREFIX + k.upper())
        if v is not None:
            merged[k] = v

    for k, v in overrides.items():
        if v is None:
            continue
        if k not in _SCALAR_FIELDS and k not in _BBOX_FIELDS:
            raise ConfigurationError(f"Config inválida: campo desconhecido '{k}'.")
        merged[k] = v

    return merged


def load_config(
    path: str | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    data = _read_yaml(path) if path else {}
    raw = _merge_sources(data, os.environ if env is None else env, overrides or {})

    dry_run = _to_bool(_opt(raw, "dry_run", False), "dry_run")

    # endpoint/key só são obrigatórios quando algo vai de fato para a rede
    if dry_run:
        endpoint = str(_opt(raw, "endpoint", ""))
        key = str(_opt(raw, "key", ""))
    else:
        endpoint = _to_endpoint(_req(raw, "endpoint"), "endpoint")
        key = str(_req(raw, "key"))

    topic_resource = str(_req(raw, "topic_resource"))
    true_image_url = str(_req(raw, "true_image_url"))
    false_image_url = str(_req(raw, "false_image_url"))
    key_header = str(_opt(raw, "key_header", "aeg-sas-key"))

    interval_ms = _to_int(_opt(raw, "interval_ms", 5000), "interval_ms")
    device_count = _to_int(_opt(raw, "device_count", 20), "device_count")
    status_weight = _to_int(_opt(raw, "status_weight", 10), "status_weight")
    timeout_sec = _to_float(_opt(raw, "timeout_sec", 10.0), "timeout_sec")
    publish_workers = _to_int(_opt(raw, "publish_workers", 1), "publish_workers")

    seed_raw = _opt(raw, "seed", None)
    seed = None if seed_raw is None or str(seed_raw).strip() == "" else _to_int(seed_raw, "seed")

    log_level = str(_opt(raw, "log_level", "INFO")).upper()

    if interval_ms < 0:
        raise ConfigurationError(f"Config inválida: 'interval_ms' deve ser >= 0 (recebido {interval_ms}).")
    if device_count <= 0:
        raise ConfigurationError(f"Config inválida: 'device_count' deve ser > 0 (recebido {device_count}).")
    if status_weight < 2:
        raise ConfigurationError(f"Config inválida: 'status_weight' deve ser >= 2 (recebido {status_weight}).")
    if timeout_sec <= 0:
        raise ConfigurationError(f"Config inválida: 'timeout_sec' deve ser > 0 (recebido {timeout_sec}).")
    if publish_workers < 1:
        raise ConfigurationError(f"Config inválida: 'publish_workers' deve ser >= 1 (recebido {publish_workers}).")
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Config inválida: 'log_level' desconhecido: {log_level}")

    d = DEFAULT_BOUNDING_BOX
    bounding_box = BoundingBox(
        max_lat=_to_decimal(_opt(raw, "max_lat", d.max_lat), "bounding_box.max_lat"),
        min_lat=_to_decimal(_opt(raw, "min_lat", d.min_lat), "bounding_box.min_lat"),
        max_long=_to_decimal(_opt(raw, "max_long", d.max_long), "bounding_box.max_long"),
        min_long=_to_decimal(_opt(raw, "min_long", d.min_long), "bounding_box.min_long"),
    )

    return AppConfig(
        endpoint=endpoint,
        topic_resource=topic_resource,
        key=key,
        key_header=key_header,
        true_image_url=true_image_url,
        false_image_url=false_image_url,
        interval_ms=interval_ms,
        device_count=device_count,
        status_weight=status_weight,
        bounding_box=bounding_box,
        seed=seed,
        timeout_sec=timeout_sec,
        publish_workers=publish_workers,
        dry_run=dry_run,
        log_level=log_level,
    )
