from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TypedDict

import yaml


CONFIG_ENV_VAR = "MINE_WEB_CONFIG_PATH"


class EndpointConfig(TypedDict):
    id: str
    label: str
    sparql_url: str


@dataclass
class UIConfig:
    page_size: int = 10
    clamp_previous_page: bool = False
    batch_size: int = 100


@dataclass
class ExportConfig:
    max_rows: int = 10000
    default_interaction_type: str = "pp"


@dataclass
class HTTPConfig:
    timeout_s: float = 30.0


@dataclass
class AppConfig:
    raw: Dict[str, Any]
    endpoints: List[EndpointConfig]
    ui: UIConfig
    export: ExportConfig
    http: HTTPConfig


class ConfigError(RuntimeError):
    """Raised when the mine-web configuration is missing or invalid."""


def _default_config_path() -> Path:
    """
    Determine the default local config path.

    This is resolved relative to the `web/` directory so it works both when run
    via `streamlit run web/app.py` and when imported as a package.
    """

    here = Path(__file__).resolve()
    web_root = here.parents[1]  # .../web
    return web_root / "configs" / "demo.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(
            f"mine-web config file not found at '{path}'. "
            f"Set {CONFIG_ENV_VAR} to a valid YAML config."
        )
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config YAML at '{path}': {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config at '{path}' must be a YAML mapping/object.")
    return data


def _coerce_endpoints(section: Any, key: str) -> List[EndpointConfig]:
    if not section:
        return []

    endpoints = section.get("endpoints")
    if endpoints is None:
        return []
    if not isinstance(endpoints, list):
        raise ConfigError(f"'{key}.endpoints' must be a list.")

    coerced: List[EndpointConfig] = []
    for idx, item in enumerate(endpoints):
        if not isinstance(item, dict):
            raise ConfigError(f"Endpoint #{idx} in '{key}.endpoints' must be a mapping.")
        try:
            eid = str(item["id"])
            label = str(item.get("label") or eid)
            url = str(item["sparql_url"])
        except KeyError as exc:
            raise ConfigError(
                f"Endpoint #{idx} in '{key}.endpoints' is missing required key: {exc}."
            ) from exc
        if not url:
            raise ConfigError(f"Endpoint '{eid}' in '{key}.endpoints' has empty sparql_url.")
        coerced.append(EndpointConfig(id=eid, label=label, sparql_url=url))
    return coerced


def _positive_int(section: Dict[str, Any], key: str, default: int, path: str) -> int:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{path}.{key}' must be an integer.") from exc
    if value <= 0:
        raise ConfigError(f"'{path}.{key}' must be positive, got {value}.")
    return value


def _positive_float(section: Dict[str, Any], key: str, default: float, path: str) -> float:
    try:
        value = float(section.get(key, default))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{path}.{key}' must be a number.") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"'{path}.{key}' must be a positive number, got {value}.")
    return value


def _flag(section: Dict[str, Any], key: str, default: bool, path: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{path}.{key}' must be true or false, got {value!r}.")
    return value


def _coerce_ui(section: Any) -> UIConfig:
    if not isinstance(section, dict):
        return UIConfig()
    return UIConfig(
        page_size=_positive_int(section, "page_size", 10, "ui"),
        clamp_previous_page=_flag(section, "clamp_previous_page", False, "ui"),
        batch_size=_positive_int(section, "batch_size", 100, "ui"),
    )


def _coerce_export(section: Any) -> ExportConfig:
    if not isinstance(section, dict):
        return ExportConfig()
    return ExportConfig(
        max_rows=_positive_int(section, "max_rows", 10000, "export"),
        default_interaction_type=str(section.get("default_interaction_type") or "pp"),
    )


def _coerce_http(section: Any) -> HTTPConfig:
    if not isinstance(section, dict):
        return HTTPConfig()
    return HTTPConfig(timeout_s=_positive_float(section, "timeout_s", 30.0, "http"))


_CACHED_CONFIG: Optional[AppConfig] = None


def load_config(force_reload: bool = False) -> AppConfig:
    """
    Load and validate the mine-web configuration.

    Precedence:
    1. Use path from MINE_WEB_CONFIG_PATH if set.
    2. Otherwise fall back to `web/configs/demo.yaml`.
    """

    global _CACHED_CONFIG
    if _CACHED_CONFIG is not None and not force_reload:
        return _CACHED_CONFIG

    env_path = os.environ.get(CONFIG_ENV_VAR)
    path = Path(env_path).expanduser() if env_path else _default_config_path()

    raw = _load_yaml(path)
    sources = raw.get("sources") or {}
    if not isinstance(sources, dict):
        raise ConfigError("'sources' section must be a mapping/object.")

    endpoints = _coerce_endpoints(sources, "sources")
    if not endpoints:
        raise ConfigError(
            "No SPARQL endpoints configured. "
            "Please define 'sources.endpoints[*].sparql_url' in the config."
        )

    _CACHED_CONFIG = AppConfig(
        raw=raw,
        endpoints=endpoints,
        ui=_coerce_ui(raw.get("ui") or {}),
        export=_coerce_export(raw.get("export") or {}),
        http=_coerce_http(raw.get("http") or {}),
    )
    return _CACHED_CONFIG


__all__ = [
    "AppConfig",
    "UIConfig",
    "ExportConfig",
    "HTTPConfig",
    "EndpointConfig",
    "ConfigError",
    "CONFIG_ENV_VAR",
    "load_config",
]
