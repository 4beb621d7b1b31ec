# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Runtime settings for schema building, the store and the CLI.

Layers, lowest first: built-in defaults, the YAML file named by
``FASTSEARCH_CONFIG`` (``./config.yml`` if unset, skipped when missing),
then ``FASTSEARCH_<SECTION>__<KEY>`` environment variables. String values
in the file may reference the environment as ``${VAR|default}``.
"""

from __future__ import annotations
import copy, os, re, yaml, threading
from pathlib import Path
from typing import Any, Dict
from dotenv import load_dotenv

load_dotenv()

_ENV_PREFIX = "FASTSEARCH_"
_PATH_VAR = _ENV_PREFIX + "CONFIG"

_DEFAULTS: Dict[str, Any] = {
    "log": {"level": "INFO"},
    "ops_log": None,
    "store": {"type": "memory"},
    "schema": {"strict_sort_type": False},
    "search": {"default_k": 10},
}

_ENV_REF = re.compile(r"\$\{([^}:|]+)(?:\|([^}]*))?\}")


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in (over or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        elif v is not None:
            out[k] = v
    return out

def _scalar(text: str) -> Any:
    # env values arrive as strings; `true`/`7`/`0.5` become real scalars
    low = text.lower()
    if low in {"true", "false"}:
        return low == "true"
    if text.isdigit():
        return int(text)
    try:
        return float(text)
    except ValueError:
        return text

def _expand(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand(v) for v in obj]
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    return obj

def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX) or key == _PATH_VAR:
            continue
        *sections, leaf = key[len(_ENV_PREFIX):].lower().split("__")
        cur = out
        for part in sections:
            cur = cur.setdefault(part, {})
        cur[leaf] = _scalar(value)
    return out

def load_settings(path: str | Path | None = None) -> Dict[str, Any]:
    """Read defaults, file and environment into one plain dict."""
    p = Path(path or os.environ.get(_PATH_VAR, "./config.yml"))
    file_cfg: Dict[str, Any] = {}
    if p.is_file():
        with p.open("r", encoding="utf-8") as f:
            file_cfg = _expand(yaml.safe_load(f) or {})
    return _merge(_merge(_DEFAULTS, file_cfg), _env_overrides())


class Config:
    """Thread-safe settings holder addressed by dotted paths (`schema.strict_sort_type`)."""

    def __init__(self, path: str | Path | None = None):
        self._lock = threading.RLock()
        self._cfg: Dict[str, Any] = load_settings(path)

    def get(self, path: str, default: Any = None) -> Any:
        with self._lock:
            cur: Any = self._cfg
            for part in path.split("."):
                if not isinstance(cur, dict) or part not in cur:
                    return default
                cur = cur[part]
            return default if cur is None else cur

    def set(self, path: str, value: Any) -> None:
        *sections, leaf = path.split(".")
        with self._lock:
            cur = self._cfg
            for part in sections:
                cur = cur.setdefault(part, {})
            cur[leaf] = value

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._cfg)

    def reload(self, path: str | Path | None = None) -> None:
        fresh = load_settings(path)
        with self._lock:
            self._cfg = fresh


# shared by the CLI, the builder and the store factory
CFG = Config()

def get_cfg() -> Config:
    return CFG

def reload_cfg(path: str | Path | None = None) -> Config:
    # reload in place so modules holding CFG see the new values
    CFG.reload(path)
    return CFG
