# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import functools, inspect, json, logging, sys, threading, time
from datetime import datetime, timezone
from typing import Any

_dest: str | None = None
_handle = None
_lock = threading.Lock()


def configure(dest: str | None) -> None:
    """
    Called once from the CLI entrypoint. dest is None/null, 'stdout', or a
    file path. Opens the file handle if needed. No-op if dest is None/null.
    """
    global _dest, _handle
    with _lock:
        if _handle is not None:
            try:
                _handle.flush()
                _handle.close()
            finally:
                _handle = None
        _dest = None

    if not dest or str(dest).strip().lower() in ("null", "none", ""):
        return

    _dest = str(dest).strip()
    if _dest != "stdout":
        with _lock:
            _handle = open(_dest, "a", encoding="utf-8", buffering=1)


def emit(**fields) -> None:
    """
    Write one JSON line. No-op if not configured. Thread-safe:
    - stdout: single sys.stdout.write() call
    - file: protected by a module-level threading.Lock()
    None values are dropped before serialisation.
    """
    if _dest is None:
        return
    ts = (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
    payload: dict = {"ts": ts}
    payload.update({k: v for k, v in fields.items() if v is not None})
    line = json.dumps(payload, separators=(",", ":"), default=str) + "\n"
    if _dest == "stdout":
        sys.stdout.write(line)
    else:
        with _lock:
            if _handle is not None:
                _handle.write(line)


def close() -> None:
    """Flush and close the file handle if open."""
    global _handle
    with _lock:
        if _handle is not None:
            try:
                _handle.flush()
                _handle.close()
            finally:
                _handle = None


# --------------- dev stream (stderr) ---------------

class _ColorFormatter(logging.Formatter):
    """Formatter with ANSI colors for terminal output."""
    COLORS = {
        logging.DEBUG:    "\033[36m",   # cyan
        logging.INFO:     "\033[32m",   # green
        logging.WARNING:  "\033[33m",   # yellow
        logging.ERROR:    "\033[31m",   # red
        logging.CRITICAL: "\033[35m",   # magenta
    }
    RESET = "\033[0m"
    BOLD  = "\033[1m"

    def __init__(self, fmt: str, datefmt: str, use_color: bool = True):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color:
            color = self.COLORS.get(record.levelno, "")
            if record.name.startswith("fastsearch"):
                record.name = f"{self.BOLD}{record.name}{self.RESET}{color}"
            record.levelname = f"{color}{record.levelname}{self.RESET}"
            record.msg = f"{color}{record.msg}{self.RESET}"
        return super().format(record)


def _init_logger() -> logging.Logger:
    """
    Initializes hierarchical logging levels:
      - fastsearch (base) → bold + colored, to stderr
      - watch namespaces (base -1 → more verbose)
      - quiet namespaces (base +1 → less verbose)
      - all others (base +2)
    Lazy import of get_cfg keeps config.py free of logging imports.
    """
    from fastsearch.config import get_cfg
    cfg = get_cfg()
    base_level = getattr(logging, str(cfg.get("log.level")).upper(), logging.INFO)

    def shift(level: int, delta: int) -> int:
        return min(logging.CRITICAL, max(logging.DEBUG, level + 10 * delta))

    root = logging.getLogger()
    root.setLevel(shift(base_level, +2))
    root.handlers.clear()

    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_ColorFormatter(
        "%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        "%H:%M:%S",
        use_color=use_color,
    ))
    root.addHandler(handler)

    fs_log = logging.getLogger("fastsearch")
    fs_log.setLevel(logging.DEBUG if cfg.get("dev", 0) else base_level)

    for ns in cfg.get("log.debug", []):
        logging.getLogger(ns).setLevel(logging.DEBUG)

    for ns in cfg.get("log.watch", []):
        logging.getLogger(ns).setLevel(shift(base_level, -1))

    for ns in cfg.get("log.quiet", ["yaml", "pydantic", "urllib3"]):
        logging.getLogger(ns).setLevel(shift(base_level, +1))

    return fs_log


_LOGGER_SINGLETON = _init_logger()


def get_logger(name: str | None = None) -> logging.Logger:
    """Returns the global fastsearch logger, or a child of it."""
    if name:
        return _LOGGER_SINGLETON.getChild(name)
    return _LOGGER_SINGLETON


LOG = _LOGGER_SINGLETON

# --------------- ops stream ---------------

def _result_status(result: Any) -> tuple[str, str | None]:
    """Return (status, error_code) from a service return value."""
    if isinstance(result, dict):
        if not result.get("ok", True):
            return "error", result.get("code")
        return "ok", None
    return "ok", None


def ops_event(
    op: str,
    *,
    coll: Any = "collection",
    **extra_keys,
):
    """
    Decorator: times the call and emits one ops_log line.

    Parameters
    ----------
    op:
        Operation name emitted in the ``op`` field (e.g. ``"search"``).
    coll:
        Source of the ``collection`` field, resolved like an extra key.
        ``None`` to omit it.
    **extra_keys:
        Additional event fields.
        - str value  → resolved as the bound argument of that name
        - callable   → called as ``fn(arguments, result)`` after the call returns
    """
    def _resolve(src: Any, arguments: dict, result: Any) -> Any:
        if src is None:
            return None
        try:
            return src(arguments, result) if callable(src) else arguments.get(src)
        except (KeyError, AttributeError, TypeError):
            return None

    def decorator(fn):
        sig = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            bound = sig.bind_partial(*args, **kwargs)
            arguments = dict(bound.arguments)
            _t0 = time.perf_counter()
            _s, _c = "error", None
            result = None
            try:
                result = fn(*args, **kwargs)
                _s, _c = _result_status(result)
                return result
            except Exception as exc:
                _c = getattr(exc, "code", type(exc).__name__)
                raise
            finally:
                emit(
                    op=op,
                    collection=_resolve(coll, arguments, result),
                    latency_ms=round((time.perf_counter() - _t0) * 1000, 2),
                    status=_s, error_code=_c,
                    **{k: _resolve(src, arguments, result) for k, src in extra_keys.items()},
                )
        return wrapper
    return decorator
