"""structlog setup for rpl.

Every destination in ``LoggingConfig.outputs`` gets its own stdlib handler,
level and renderer (coloured console lines or JSON lines). Events emitted
while the route store refreshes carry a ``refresh_id`` so one scan's parse
failures, diff and notifications can be read together.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from routeplane.config.models import LoggingConfig, LogOutputConfig

_refresh_id: ContextVar[str | None] = ContextVar("refresh_id", default=None)


def get_refresh_id() -> str | None:
    return _refresh_id.get()


def set_refresh_id(refresh_id: str | None = None) -> str:
    """Mark the current context as part of one store refresh."""
    rid = refresh_id or uuid4().hex[:12]
    _refresh_id.set(rid)
    return rid


def clear_refresh_id() -> None:
    _refresh_id.set(None)


def _stamp_refresh_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_refresh_id():
        event_dict["refresh_id"] = rid
    return event_dict


_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _level(name: str | None, fallback: int) -> int:
    return _LEVELS.get(name.upper(), fallback) if name else fallback


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install rpl's log handlers on the root logger.

    ``config`` comes from ``load_config``. Without it a single stderr output
    is built from ``json_format`` and ``level``, which is what the CLI uses
    before a workspace config has been read.
    """
    from routeplane.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.INFO)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _stamp_refresh_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # rpl watch reconfigures after loading the workspace config
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    # watchfiles logs every filtered change at debug level
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _open_destination(output.destination)
        handler.setLevel(_level(output.level or config.level, root_level))
        handler.setFormatter(_formatter_for(output, pre_chain))
        root_logger.addHandler(handler)


def _formatter_for(
    output: LogOutputConfig,
    pre_chain: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        to_terminal = output.destination in ("stderr", "stdout") and sys.stderr.isatty()
        renderer = structlog.dev.ConsoleRenderer(
            colors=to_terminal, pad_event_to=0, pad_level=False
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _open_destination(destination: str) -> logging.Handler:
    """``stderr``, ``stdout`` or a log file path, appended to."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """A structlog logger, tagged with ``logger=name`` when given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
