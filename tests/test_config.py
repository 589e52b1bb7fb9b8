from decimal import Decimal

import pytest

from config import DEFAULT_BOUNDING_BOX, load_config
from domain.errors import ConfigurationError

BASE = {
    "endpoint": "https://sink.test/api/events",
    "topic_resource": "/topics/alarms",
    "key": "s3cret",
    "true_image_url": "https://example.org/t.jpg",
    "false_image_url": "https://example.org/f.jpg",
}

YAML = """
endpoint: https://sink.test/api/events
topic_resource: /topics/alarms
key: s3cret
true_image_url: https://example.org/t.jpg
false_image_url: https://example.org/f.jpg
interval_ms: 1000
device_count: 5
bounding_box:
  max_lat: 54.5
  min_lat: 50.25
  max_long: -0.1
  min_long: -4.0
"""


def test_defaults_from_overrides_only():
    cfg = load_config(env={}, overrides=BASE)
    assert cfg.interval_ms == 5000
    assert cfg.device_count == 20
    assert cfg.status_weight == 10
    assert cfg.bounding_box == DEFAULT_BOUNDING_BOX
    assert cfg.key_header == "aeg-sas-key"
    assert cfg.seed is None
    assert cfg.publish_workers == 1
    assert cfg.dry_run is False


def test_yaml_file(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(YAML, encoding="utf-8")

    cfg = load_config(str(p), env={})

    assert cfg.interval_ms == 1000
    assert cfg.device_count == 5
    assert cfg.bounding_box.max_lat == Decimal("54.5")
    assert cfg.bounding_box.min_long == Decimal("-4.0")
    assert cfg.bounding_box.max_long == Decimal("-0.1")


def test_precedence_yaml_env_cli(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(YAML, encoding="utf-8")

    env = {"ALARMSIM_DEVICE_COUNT": "7", "ALARMSIM_INTERVAL_MS": "250", "ALARMSIM_MAX_LAT": "55.1"}
    cfg = load_config(str(p), env=env, overrides={"device_count": "9"})

    assert cfg.device_count == 9
    assert cfg.interval_ms == 250
    assert cfg.bounding_box.max_lat == Decimal("55.1")


def test_missing_file():
    with pytest.raises(ConfigurationError):
        load_config("/nonexistent/alarms.yaml", env={})


@pytest.mark.parametrize("missing", ["endpoint", "topic_resource", "key", "true_image_url", "false_image_url"])
def test_missing_required(missing):
    raw = {k: v for k, v in BASE.items() if k != missing}
    with pytest.raises(ConfigurationError, match=missing):
        load_config(env={}, overrides=raw)


def test_dry_run_does_not_need_endpoint_or_key():
    raw = {k: v for k, v in BASE.items() if k not in ("endpoint", "key")}
    cfg = load_config(env={}, overrides={**raw, "dry_run": True})
    assert cfg.dry_run is True
    assert cfg.endpoint == ""


@pytest.mark.parametrize(
    "field, value",
    [
        ("interval_ms", "fast"),
        ("interval_ms", "-1"),
        ("device_count", "0"),
        ("device_count", "-5"),
        ("status_weight", "1"),
        ("status_weight", "abc"),
        ("timeout_sec", "0"),
        ("publish_workers", "0"),
        ("max_lat", "north"),
        ("min_long", "NaN"),
        ("log_level", "chatty"),
        ("dry_run", "maybe"),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(ConfigurationError):
        load_config(env={}, overrides={**BASE, field: value})


def test_unknown_override_rejected():
    with pytest.raises(ConfigurationError):
        load_config(env={}, overrides={**BASE, "colour": "blue"})


def test_yaml_float_bounds_keep_decimal_digits(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text(YAML + "\n", encoding="utf-8")
    cfg = load_config(str(p), env={}, overrides={"min_lat": 51.010299})
    assert cfg.bounding_box.min_lat == Decimal("51.010299")


def test_seed_parsed():
    cfg = load_config(env={"ALARMSIM_SEED": "1234"}, overrides=BASE)
    assert cfg.seed == 1234


@pytest.mark.parametrize(
    "endpoint",
    ["https://[::1/api", "ftp://sink.test/api", "sink.test/api/events", "not a url", "https://"],
)
def test_malformed_endpoint_rejected(endpoint):
    with pytest.raises(ConfigurationError, match="endpoint"):
        load_config(env={}, overrides={**BASE, "endpoint": endpoint})


def test_http_endpoint_accepted():
    cfg = load_config(env={}, overrides={**BASE, "endpoint": "http://localhost:7071/api/events"})
    assert cfg.endpoint == "http://localhost:7071/api/events"
