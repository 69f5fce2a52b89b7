import os
from copy import deepcopy
from typing import Any, Dict, Tuple

import yaml
from structlog import get_logger

logger = get_logger("config.loader")

DEFAULT_YAML_PATH = "config/settings.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "scale": 1.0,  # multiplier for every iteration count
    "scenarios": [],  # empty = whole catalogue
    "stability": True,
    "threads": None,  # None = per-scenario default
    "log_level": "WARNING",
    "log_format": "json",  # json | console
    "metrics": False,
}


def _load_settings_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file without a mapping at top level", path=path)
        return {}
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge; nested dicts merged recursively."""
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge(deepcopy(base.get(k, {})), v)
        else:
            base[k] = v
    return base


def _bool_env(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_overrides() -> Dict[str, Any]:
    env: Dict[str, Any] = {}
    if os.getenv("IDIOM_BENCH_SCALE"):
        try:
            env["scale"] = float(os.getenv("IDIOM_BENCH_SCALE"))
        except ValueError:
            logger.warning("Invalid IDIOM_BENCH_SCALE, ignoring", value=os.getenv("IDIOM_BENCH_SCALE"))
    if os.getenv("IDIOM_BENCH_SCENARIOS"):
        env["scenarios"] = [s.strip() for s in os.getenv("IDIOM_BENCH_SCENARIOS").split(",") if s.strip()]
    if os.getenv("IDIOM_BENCH_STABILITY"):
        env["stability"] = _bool_env(os.getenv("IDIOM_BENCH_STABILITY"))
    if os.getenv("IDIOM_BENCH_LOG_LEVEL"):
        env["log_level"] = os.getenv("IDIOM_BENCH_LOG_LEVEL")
    return env


def load_settings(cli_overrides: Dict[str, Any] | None = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return (settings, applied_defaults) after applying priority chain."""
    cli_overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    settings = deepcopy(DEFAULT_SETTINGS)
    applied_defaults = deepcopy(DEFAULT_SETTINGS)

    settings = _merge(settings, _load_settings_yaml(DEFAULT_YAML_PATH))
    settings = _merge(settings, _env_overrides())
    settings = _merge(settings, cli_overrides)

    return settings, applied_defaults


def summarize_settings(settings: Dict[str, Any]) -> str:
    lines = []
    lines.append(f"scale={settings.get('scale')}")
    lines.append(f"scenarios={','.join(settings.get('scenarios') or []) or 'all'}")
    lines.append(f"stability={settings.get('stability')}")
    lines.append(f"threads={settings.get('threads') or 'default'}")
    lines.append(f"log_level={settings.get('log_level')}")
    return " | ".join(lines)
