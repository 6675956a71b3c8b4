"""
ENCRYPTION METRICS
==================
Prometheus-backed counters for field conversions.
"""

from __future__ import annotations

from typing import Dict

from prometheus_client import Counter

from Encryption.encryption_config import ENCRYPTION_SETTINGS


OPERATIONS = ("encrypt", "decrypt")
OUTCOMES = ("success", "bypass", "failure")

_CONVERSION_EVENTS = None


def _enabled() -> bool:
    return ENCRYPTION_SETTINGS["METRICS_ENABLED"]


def _init_metrics() -> None:
    global _CONVERSION_EVENTS
    if _CONVERSION_EVENTS or not _enabled():
        return
    _CONVERSION_EVENTS = Counter(
        "field_encryption_events_total",
        "Count of field encryption conversions",
        ["operation", "outcome"],
    )


def increment_conversion_event(operation: str, outcome: str, amount: int = 1) -> None:
    _init_metrics()
    if not _CONVERSION_EVENTS:
        return
    _CONVERSION_EVENTS.labels(operation=operation, outcome=outcome).inc(amount)


def _counter_value(operation: str, outcome: str) -> int:
    try:
        return int(_CONVERSION_EVENTS.labels(operation=operation, outcome=outcome)._value.get())
    except AttributeError:
        return 0


def get_conversion_metrics_snapshot() -> Dict[str, Dict[str, int]]:
    _init_metrics()
    snapshot: Dict[str, Dict[str, int]] = {}
    for operation in OPERATIONS:
        snapshot[operation] = {
            outcome: _counter_value(operation, outcome) if _CONVERSION_EVENTS else 0
            for outcome in OUTCOMES
        }
    return snapshot
