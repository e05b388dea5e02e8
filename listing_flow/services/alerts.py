from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

log = logging.getLogger(__name__)


class AlertSink(Protocol):
    def notify(self, title: str, message: str) -> None:
        ...


class LoggingAlertSink:
    """Alert sink for headless use: alerts only go to the log."""

    def notify(self, title: str, message: str) -> None:
        log.info("alert: %s - %s", title, message)


@dataclass(frozen=True)
class Alert:
    title: str
    message: str


class CollectingAlertSink:
    """
    Keeps alerts in memory so a request handler can return them to the
    client that shows them.
    """

    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def notify(self, title: str, message: str) -> None:
        self.alerts.append(Alert(title=title, message=message))
