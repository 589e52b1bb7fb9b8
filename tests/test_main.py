import logging

import pytest

import main

ARGS = [
    "https://sink.test/api/events",
    "/topics/alarms",
    "s3cret",
    "https://example.org/f.jpg",
    "https://example.org/t.jpg",
    "0",
]


def test_config_error_exits_before_loop(monkeypatch):
    monkeypatch.delenv("ALARMSIM_DEVICE_COUNT", raising=False)
    with pytest.raises(SystemExit) as exc:
        main.main(ARGS + ["--device-count", "0"])
    assert exc.value.code == 2


def test_missing_positional_exits(monkeypatch):
    for k in ("ALARMSIM_ENDPOINT", "ALARMSIM_TOPIC_RESOURCE", "ALARMSIM_KEY"):
        monkeypatch.delenv(k, raising=False)
    with pytest.raises(SystemExit) as exc:
        main.main([])
    assert exc.value.code == 2


def test_dry_run_bounded(caplog):
    caplog.set_level(logging.INFO)
    main.main(ARGS + ["--dry-run", "--ticks", "2", "--device-count", "3", "--seed", "5"])

    dry = [r for r in caplog.records if r.getMessage().startswith("dry-run event")]
    assert len(dry) == 6
    ticks = [r for r in caplog.records if "tick=" in r.getMessage() and "sent=3" in r.getMessage()]
    assert len(ticks) == 2


def test_build_simulator_http_sink():
    from config import load_config
    from infra.http_event_sink import HttpEventSink

    cfg = load_config(env={}, overrides={
        "endpoint": ARGS[0],
        "topic_resource": ARGS[1],
        "key": ARGS[2],
        "false_image_url": ARGS[3],
        "true_image_url": ARGS[4],
        "device_count": "4",
        "seed": "9",
    })
    sim, sink = main.build_simulator(cfg)
    assert isinstance(sink, HttpEventSink)
    assert len(sim.registry) == 4
    assert sim.topic == "/topics/alarms"


@pytest.mark.parametrize("ticks", ["0", "-1", "many"])
def test_ticks_must_be_positive(ticks):
    with pytest.raises(SystemExit) as exc:
        main.main(ARGS + ["--dry-run", "--ticks", ticks])
    assert exc.value.code == 2


def test_bad_endpoint_exits_before_loop():
    with pytest.raises(SystemExit) as exc:
        main.main(["https://[::1/api"] + ARGS[1:])
    assert exc.value.code == 2
