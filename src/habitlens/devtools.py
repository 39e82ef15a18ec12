"""Dev-mode diagnostics routed through the ``habitlens.dev`` logger."""

from __future__ import annotations

from typing import Any, Mapping

from .config import BaseConfig
from .logging_config import get_logger

logger = get_logger("dev")


def in_dev_mode(config: BaseConfig | None) -> bool:
    return bool(getattr(config, "DEV_MODE", False))


def dev_log(
    config: BaseConfig | None,
    message: str,
    *,
    exc: Exception | None = None,
    context: Mapping[str, Any] | None = None,
) -> None:
    """Log a ``[DEV]`` diagnostic when dev mode is on; a no-op otherwise.

    ``context`` values are stringified into the record's ``dev_context`` so
    paths and ids land in the JSON log file as-is.
    """

    if not in_dev_mode(config):
        return

    details = {str(key): str(value) for key, value in (context or {}).items()}
    suffix = " ".join(f"{key}={value}" for key, value in sorted(details.items()))
    logger.info(
        f"[DEV] {message}" + (f" ({suffix})" if suffix else ""),
        extra={"dev_context": details},
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
    )
