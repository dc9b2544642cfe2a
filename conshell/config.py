#!/usr/bin/env python3
# conshell/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) Files in the search directory: .env, config.ini, config.json, config.toml
  3) Environment variables prefixed with CONSHELL_ (CONSHELL_PROMPT, ...)

Validation:
  - PROMPT: str (may be empty)
  - LINE_READER: one of {'auto','prompt_toolkit','readline','plain'}
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
  - CTRL_C_INTERRUPTS / CTRL_D_IS_EOF / CTRL_Z_IS_EOF: bool
  - HISTORY_SIZE: int >= 0 (0 = unbounded)
  - PLUGIN_PACKAGE: None or dotted module path
"""

import configparser
import json
import os
import re
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

ENV_PREFIX = "CONSHELL_"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "PROMPT": "> ",
    "LINE_READER": "auto",
    "LOG_LEVEL": None,
    "LOG_FILE_PATH": None,
    # Ctrl-C interrupts and Ctrl-D ends input on POSIX; Ctrl-Z ends input on Windows
    "CTRL_C_INTERRUPTS": os.name != "nt",
    "CTRL_D_IS_EOF": True,
    "CTRL_Z_IS_EOF": os.name == "nt",
    "HISTORY_SIZE": 0,
    "PLUGIN_PACKAGE": None,
}

_READER_KINDS = {"auto", "prompt_toolkit", "readline", "plain"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


# ---------- data model ----------

@dataclass(frozen=True)
class ShellConfig:
    prompt: str = DEFAULTS["PROMPT"]
    line_reader: str = DEFAULTS["LINE_READER"]
    log_level: str | None = None
    log_file_path: Path | None = None

    ctrl_c_interrupts: bool = DEFAULTS["CTRL_C_INTERRUPTS"]
    ctrl_d_is_eof: bool = DEFAULTS["CTRL_D_IS_EOF"]
    ctrl_z_is_eof: bool = DEFAULTS["CTRL_Z_IS_EOF"]

    history_size: int = 0
    plugin_package: str | None = None

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if len(v) >= 2 and v[0] == v[-1] and v[0] in "'\"":
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    # Keep values verbatim (prompts may contain '%')
    cfg = configparser.ConfigParser(interpolation=None)
    if not cfg.read(path, encoding="utf-8"):
        return {}
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'ctrl': {'d_is_eof': true}} -> {'CTRL_D_IS_EOF': True}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_int(val: Any) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    try:
        return int(str(val).strip())
    except ValueError as exc:
        raise ValueError(f"Expected integer, got: {val!r}") from exc


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    if up not in _LOG_LEVELS:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {lv!r}")
    return up


def _as_opt_path(val: Any, base: Path) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    p = Path(os.path.expandvars(os.path.expanduser(v)))
    return (p if p.is_absolute() else base / p).resolve()


# ---------- merge & build ----------

def _merge_sources(search_dir: Path, environ: Mapping[str, str]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    merged.update(_normalize_keys(_load_env_file(search_dir / ".env")))
    merged.update(_normalize_keys(_load_ini_file(search_dir / "config.ini")))
    merged.update(_normalize_keys(
        _flatten_mapping(_load_json_file(search_dir / "config.json"))))
    merged.update(_normalize_keys(
        _flatten_mapping(_load_toml_file(search_dir / "config.toml"))))

    # Environment variables override all
    merged.update({k[len(ENV_PREFIX):]: v for k, v in environ.items()
                   if k.startswith(ENV_PREFIX) and len(k) > len(ENV_PREFIX)})
    return merged


def build_config(values: Mapping[str, Any], *, base: Path | None = None) -> ShellConfig:
    """Validate a flat UPPER_SNAKE mapping into a ShellConfig."""
    config = dict(DEFAULTS)
    config.update(_normalize_keys(values))
    base = base or Path.cwd()

    prompt = config.get("PROMPT")
    prompt = "" if prompt is None else str(prompt)

    line_reader = str(config.get("LINE_READER") or "auto").strip().lower()
    if line_reader not in _READER_KINDS:
        raise ValueError(
            f"LINE_READER must be one of {sorted(_READER_KINDS)}, got {line_reader!r}")

    history_size = _as_int(config.get("HISTORY_SIZE"))
    if history_size < 0:
        raise ValueError("HISTORY_SIZE must be >= 0")

    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return ShellConfig(
        prompt=prompt,
        line_reader=line_reader,
        log_level=_as_log_level(config.get("LOG_LEVEL")),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH"), base),
        ctrl_c_interrupts=_as_bool(config.get("CTRL_C_INTERRUPTS")),
        ctrl_d_is_eof=_as_bool(config.get("CTRL_D_IS_EOF")),
        ctrl_z_is_eof=_as_bool(config.get("CTRL_Z_IS_EOF")),
        history_size=history_size,
        plugin_package=_as_opt_str(config.get("PLUGIN_PACKAGE")),
        extra=extra,
    )


# ---------- public API ----------

def load_config(
    search_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ShellConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects. Raises ValueError on invalid values.
    """
    base = Path(search_dir) if search_dir is not None else Path.cwd()
    raw = _merge_sources(base, os.environ if environ is None else environ)
    return build_config(raw, base=base)
