"""Structured logging and profiling for the editor engine, backed by telelog.

Callers use four functions:

``configure(...)``      adopt a named preset or an explicit ``tl.Config``
``get_logger(name)``    cached telelog logger bound to the active config
``record_event(...)``   one ``event::<name>`` line with key/value pairs
``span(...)``           profile a block, optionally tracked as a component
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

from .settings import env, env_flag, env_int

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = env("LOGGER") or "markdown_engine"
DEFAULT_LOG_FILE = env("LOG_FILE") or ""

# Builder calls applied on top of a fresh ``tl.Config`` for each preset.
_PRESETS: Mapping[str, Mapping[str, Any]] = {
    "development": {
        "with_min_level": "DEBUG",
        "with_console_output": True,
        "with_colored_output": True,
        "with_json_format": False,
    },
    "production": {
        "with_min_level": "INFO",
        "with_console_output": False,
        "with_file_output": DEFAULT_LOG_FILE or "markdown_engine.log",
        "with_buffering": True,
    },
    "performance": {
        "with_min_level": "DEBUG",
        "with_console_output": False,
        "with_json_format": True,
        "with_file_output": DEFAULT_LOG_FILE or "markdown_engine-performance.log",
        "with_buffering": True,
    },
}

_loggers: MutableMapping[str, Any] = {}
_active_config: Optional[Any] = None


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _build(options: Mapping[str, Any]) -> Any:
    config = tl.Config()
    for method, argument in options.items():
        getattr(config, method)(argument)
    # Spans rely on ``logger.profile``.
    config.with_profiling(True)
    return config


def _env_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "with_min_level": (env("LOG_LEVEL") or "INFO").upper(),
    }
    console = not env_flag("DISABLE_CONSOLE", False)
    options["with_console_output"] = console
    if console:
        options["with_colored_output"] = not env_flag("NO_COLOR", False)
    if env_flag("LOG_JSON", False):
        options["with_json_format"] = True
    if DEFAULT_LOG_FILE:
        options["with_file_output"] = DEFAULT_LOG_FILE
    if env_flag("LOG_BUFFERED", False):
        options["with_buffering"] = True
        options["with_buffer_size"] = env_int("LOG_BUFFER_SIZE", 2048)
    return options


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    With neither argument the ``MARKDOWN_ENGINE_LOG_*`` variables decide.
    ``preset`` is one of ``development``, ``production`` or ``performance``
    and cannot be combined with ``config``.
    """

    global _active_config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        options = _PRESETS.get(preset.lower())
        if options is None:
            raise ValueError(f"Unknown preset '{preset}'.")
        config = _build(options)
    elif config is None:
        config = _build(_env_options())
    else:
        config.with_profiling(True)

    _active_config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    if _active_config is None:
        configure()
    key = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(key)
    if logger is None:
        logger = _loggers[key] = tl.Logger.with_config(key, _active_config)
    return logger


def _log(logger: Any, level: str, message: str, fields: Mapping[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _text(v)) for k, v in fields.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(fields)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; metadata added here lands on failure lines."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        fields["reason"] = reason
        _log(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``component=True`` also tracks it as a component of the same name, a
    string tracks it under that name. ``metadata`` is pushed as logger
    context until the block exits. Exceptions are logged via
    :meth:`SpanHandle.fail` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}

    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )
    for key, value in context.items():
        log.add_context(key, value)
    try:
        with ExitStack() as stack:
            if component_name:
                stack.enter_context(log.track_component(component_name))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in context:
            log.remove_context(key)


configure()

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
