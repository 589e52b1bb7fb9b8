from __future__ import annotations


import httpx

from domain.errors import PublishError
from domain.models import AlarmEvent
from domain.ports import EventSink

from .serialization import event_to_json


class HttpEventSink(EventSink):
    """
    POST de um envelope por vez (array JSON com 1 elemento).
    Uma tentativa só: sem retry, sem backoff.
    """

    def __init__(
        self,
        url: str,
        key: str,
        *,
        key_header: str = "aeg-sas-key",
        timeout_sec: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._key = key
        self._key_header = key_header
        self._timeout = timeout_sec
        self._transport = transport

        self._client: httpx.Client | None = None
        self._started = False

        # métricas simples
        self.total_published = 0
        self.total_failed = 0
        self.total_sent = 0

    def start(self) -> None:
        if self._started:
            return
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={
                "Accept": "application/json",
                self._key_header: self._key,
            },
            transport=self._transport,
        )
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        if self._client:
            self._client.close()
            self._client = None

    def publish(self, event: AlarmEvent) -> None:
        if not self._started or self._client is None:
            raise RuntimeError("HttpEventSink.publish chamado antes de start()")

        self.total_published += 1

        try:
            r = self._client.post(self._url, json=[event_to_json(event)])
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.total_failed += 1
            raise PublishError(f"falha de transporte para evento {event.id}: {e}") from e

        # sucesso = qualquer 2xx
        if not r.is_success:
            self.total_failed += 1
            raise PublishError(
                f"sink respondeu {r.status_code} para evento {event.id}",
                status_code=r.status_code,
            )

        self.total_sent += 1
