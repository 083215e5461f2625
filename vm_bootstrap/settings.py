from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

CONFIG_ENV = "BOOTSTRAP_CONFIG"
LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def _resolve_env_value(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_name = value[2:-1].strip()
        if env_name:
            return os.getenv(env_name, "")
    return value


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ValueError(f"config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"expected mapping in config file: {path}")
    return {str(k): _resolve_env_value(v) for k, v in data.items()}


def _pick(env_name: str, file_values: Mapping[str, Any], key: str, default: Any) -> Any:
    value = os.getenv(env_name)
    if value is not None and value != "":
        return value
    value = file_values.get(key)
    if value is None or value == "":
        return default
    return value


@dataclass(frozen=True)
class BootstrapSettings:
    scripts_root: str = "."
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"

    def __post_init__(self) -> None:
        if not 0 < int(self.port) < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

    @classmethod
    def from_env(cls, config_file: str | None = None) -> "BootstrapSettings":
        """Settings from ``BOOTSTRAP_*`` variables layered over an optional YAML file."""
        config_path = config_file or os.getenv(CONFIG_ENV)
        file_values: Mapping[str, Any] = _load_config_file(Path(config_path)) if config_path else {}

        raw_port = _pick("BOOTSTRAP_PORT", file_values, "port", cls.port)
        try:
            port = int(raw_port)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid port: {raw_port!r}") from e

        return cls(
            scripts_root=str(_pick("BOOTSTRAP_SCRIPTS_ROOT", file_values, "scripts_root", cls.scripts_root)),
            host=str(_pick("BOOTSTRAP_HOST", file_values, "host", cls.host)),
            port=port,
            log_level=str(_pick("BOOTSTRAP_LOG_LEVEL", file_values, "log_level", cls.log_level)).strip().lower(),
        )
