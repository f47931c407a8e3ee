"""Call logging for the client and service layers."""

from __future__ import annotations

import functools
import inspect
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_LOG_DIR = os.environ.get("JOLPICA_LOG_DIR", os.path.join(os.getcwd(), "logs"))
_LOG_FILE = os.path.join(_LOG_DIR, "api_calls.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        _logger = logging.getLogger("jolpica.api")
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        if not _logger.handlers:
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _describe_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # Skip 'self'
    arg_parts = [repr(a) for a in args[1:]]
    arg_parts += [f"{k}={v!r}" for k, v in kwargs.items() if not callable(v)]
    return ", ".join(arg_parts)


def _count(result: Any) -> int:
    return len(result) if isinstance(result, list) else 1


def log_api_call(fn: F) -> F:
    """Decorator that logs client endpoint calls to the API log file."""

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = _get_logger()
            arg_str = _describe_args(args, kwargs)
            logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

            start = time.monotonic()
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                elapsed = time.monotonic() - start
                logger.error(
                    "FAIL: %s(%s) -> %s: %s (%.3fs)",
                    fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
                )
                raise
            elapsed = time.monotonic() - start
            logger.info(
                "OK: %s(%s) -> %d items (%.3fs)",
                fn.__qualname__, arg_str, _count(result), elapsed,
            )
            return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info(
                "OK: %s(%s) -> %d items (%.3fs)",
                fn.__qualname__, arg_str, _count(result), elapsed,
            )
            return result
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
            )
            raise

    return wrapper  # type: ignore[return-value]


def log_service_call(fn: F) -> F:
    """Decorator that logs service-layer calls to the API log file."""

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = _get_logger()
            arg_str = _describe_args(args, kwargs)
            logger.info("SERVICE CALL: %s(%s)", fn.__qualname__, arg_str)

            start = time.monotonic()
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                elapsed = time.monotonic() - start
                logger.error(
                    "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                    fn.__qualname__, type(exc).__name__, exc, elapsed,
                )
                raise
            elapsed = time.monotonic() - start
            logger.info("SERVICE OK: %s -> %.3fs", fn.__qualname__, elapsed)
            return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("SERVICE CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("SERVICE OK: %s -> %.3fs", fn.__qualname__, elapsed)
            return result
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, elapsed,
            )
            raise

    return wrapper  # type: ignore[return-value]
