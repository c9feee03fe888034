"""
app/logging_utils.py

Structured milestone logging for the sales analysis pipeline.

Every event is one compact JSON line. Event names share the
``EVENT_NAMESPACE`` prefix and each payload names the emitting component,
so pipeline milestones can be filtered out of ordinary module logs.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.sales import ParseResult

EVENT_NAMESPACE = "weeromzet"


def event_name(event: str) -> str:
    if event.startswith(f"{EVENT_NAMESPACE}."):
        return event
    return f"{EVENT_NAMESPACE}.{event}"


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one pipeline milestone as compact JSON.

    ``component`` defaults to the logger name; None-valued fields are dropped.
    """

    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event_name(event), "component": logger.name}
    payload.update({key: value for key, value in fields.items() if value is not None})
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def log_parse_summary(logger: logging.Logger, parse_result: "ParseResult") -> None:
    """
    Log the detected layout and row accounting of one parsed upload.

    Parse failures raise the level to WARNING.
    """

    detected = parse_result.detected_format
    log_event(
        logger,
        logging.WARNING if parse_result.error_rows else logging.INFO,
        "sales_parsed",
        separator=detected.separator.value,
        has_headers=detected.has_headers,
        date_format=detected.date_format.value,
        total_rows=parse_result.total_rows,
        successful_rows=parse_result.successful_rows,
        error_rows=parse_result.error_rows,
    )
