"""Structured event logging and StatsD metrics for ScamShield components.

Events are written through the standard :mod:`logging` tree as one JSON
object per line (or a plain ``event | fields`` line when structured logging is
off). Metrics go to a StatsD agent over UDP when ``observability.statsd_host``
is configured and are dropped otherwise.
"""

from __future__ import annotations

import json
import logging
import socket
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping

from scamshield.settings import Settings, get_settings

_LOGGER = logging.getLogger("scamshield.observability")
_STATSD_LOCK = threading.Lock()
_STATSD_CLIENT: "StatsdClient | None" = None


class StatsdClient:
    """Fire-and-forget StatsD sender with DogStatsD-style tags."""

    def __init__(self, host: str, port: int, prefix: str = "") -> None:
        self.address = (host, port)
        self.prefix = prefix
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def send(self, metric: str, value: float, metric_type: str, tags: Mapping[str, str] | None = None) -> None:
        packet = format_packet(f"{self.prefix}.{metric}" if self.prefix else metric, value, metric_type, tags)
        try:
            self._socket.sendto(packet.encode("utf-8"), self.address)
        except OSError:
            _LOGGER.debug("Dropped StatsD packet %s", packet, exc_info=True)


class Observability:
    """Per-component facade over event logging and metrics."""

    def __init__(
        self,
        *,
        settings: Settings,
        component: str | None = None,
        statsd: StatsdClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.component = component or "core"
        self.service = settings.observability.service_name
        self.structured = settings.observability.structured_logging
        self._statsd = statsd
        self._logger = logger or _LOGGER

    def emit_event(self, event: str, **fields: Any) -> None:
        payload: Dict[str, Any] = {
            "event": event,
            "service": self.service,
            "component": self.component,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        payload.update(fields)
        if self.structured:
            self._logger.info(json.dumps(payload, default=str, sort_keys=True))
        else:
            details = " ".join(f"{key}={value}" for key, value in fields.items())
            self._logger.info("%s | %s %s", event, self.component, details)

    def increment(self, metric: str, *, value: float = 1.0, tags: Mapping[str, Any] | None = None) -> None:
        if self._statsd:
            self._statsd.send(metric, value, "c", self._tags(tags))

    def record_timing(self, metric: str, value_ms: float, *, tags: Mapping[str, Any] | None = None) -> None:
        if self._statsd:
            self._statsd.send(metric, value_ms, "ms", self._tags(tags))

    @contextmanager
    def timer(self, metric: str, **tags: Any) -> Iterator[None]:
        """Record the wall time of the ``with`` block as a timing metric."""

        started = time.perf_counter()
        try:
            yield
        finally:
            self.record_timing(metric, (time.perf_counter() - started) * 1000, tags=tags)

    def _tags(self, tags: Mapping[str, Any] | None) -> Dict[str, str]:
        merged = {"component": self.component}
        for key, value in (tags or {}).items():
            if value is not None:
                merged[str(key)] = str(value)
        return merged


def format_packet(metric: str, value: float, metric_type: str, tags: Mapping[str, str] | None = None) -> str:
    """Return the StatsD wire line, e.g. ``scamshield.analysis.requests:1|c|#outcome:no_data``."""

    number = f"{value:.3f}".rstrip("0").rstrip(".") or "0"
    packet = f"{metric}:{number}|{metric_type}"
    if tags:
        packet += "|#" + ",".join(f"{key}:{tags[key]}" for key in sorted(tags))
    return packet


def get_observability(*, component: str | None = None, settings: Settings | None = None) -> Observability:
    """Return an :class:`Observability` for ``component`` sharing one StatsD socket per process."""

    resolved = settings or get_settings()
    return Observability(settings=resolved, component=component, statsd=_shared_statsd(resolved))


def reset_observability_cache() -> None:
    """Forget the shared StatsD client so the next lookup re-reads settings."""

    global _STATSD_CLIENT
    with _STATSD_LOCK:
        _STATSD_CLIENT = None


def _shared_statsd(settings: Settings) -> StatsdClient | None:
    global _STATSD_CLIENT
    host = settings.observability.statsd_host
    if not host:
        return None
    with _STATSD_LOCK:
        if _STATSD_CLIENT is None:
            _STATSD_CLIENT = StatsdClient(
                host,
                settings.observability.statsd_port,
                settings.observability.statsd_prefix,
            )
        return _STATSD_CLIENT


__all__ = ["Observability", "StatsdClient", "format_packet", "get_observability", "reset_observability_cache"]
