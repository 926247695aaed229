# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Configuration loading for nano-asgi.

Sources, lowest to highest priority:

    defaults < TOML file < NANO_ASGI_* environment variables < explicit arguments

Key constraints:
- TOML keys CANNOT contain underscore (_); use single words (``loglevel``,
  ``maxage``).
- String values may reference the environment: ``${VAR}`` (required) or
  ``${VAR:-default}``.

Example TOML structure:
    [server]
    host = "0.0.0.0"
    port = 8080
    logs = true
    loglevel = "DEBUG"

    [middleware]
    cors = "on"
    auth = "on"

    [cors]
    origins = ["https://example.com"]

    [auth]
    secret = "${JWT_SECRET}"
    exclude = ["/login"]

Environment variables:
    NANO_ASGI_HOST, NANO_ASGI_PORT, NANO_ASGI_LOGS, NANO_ASGI_LOG_LEVEL,
    NANO_ASGI_DEBUG, NANO_ASGI_CORS_ORIGINS (comma-separated)
"""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .utils import parse_enabled, split_and_strip

__all__ = ["ConfigError", "ServerConfig", "find_config_file", "load_config", "validate_keys"]

ENV_PREFIX = "NANO_ASGI_"


def validate_keys(data: Any, path: str = "") -> None:
    """
    Validate that no keys contain underscore.

    Raises:
        ConfigError: If a key contains underscore.
    """
    if isinstance(data, dict):
        for key, value in data.items():
            child_path = f"{path}.{key}" if path else key
            if "_" in key:
                raise ConfigError(
                    f"Invalid key '{child_path}': underscore (_) is not allowed in keys. "
                    f"Use single words instead."
                )
            validate_keys(value, child_path)
    elif isinstance(data, list):
        for i, item in enumerate(data):
            validate_keys(item, f"{path}[{i}]")


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Raises:
        ConfigError: If file not found, invalid TOML, keys contain underscore
            or a required environment variable is missing.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse TOML: {e}") from e

    validate_keys(config)
    return dict(_expand_env_vars(config))


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ``${VAR}`` / ``${VAR:-default}`` in string values."""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return _expand_string(obj)
    return obj


def _expand_string(s: str) -> str:
    pattern = r"\$\{([^}]+)\}"

    def replace(match: re.Match[str]) -> str:
        expr = match.group(1)
        if ":-" in expr:
            var_name, default = expr.split(":-", 1)
            return os.environ.get(var_name, default)
        value = os.environ.get(expr)
        if value is None:
            raise ConfigError(f"Required environment variable not set: {expr}")
        return value

    return re.sub(pattern, replace, s)


def find_config_file() -> Path | None:
    """
    Find configuration file in standard locations.

    Searches:
    1. NANO_ASGI_CONFIG environment variable
    2. ./nano-asgi.toml
    3. ./config.toml
    4. ./config/nano-asgi.toml
    """
    env_config = os.environ.get("NANO_ASGI_CONFIG")
    if env_config:
        path = Path(env_config)
        if path.exists():
            return path

    locations = [
        Path.cwd() / "nano-asgi.toml",
        Path.cwd() / "config.toml",
        Path.cwd() / "config" / "nano-asgi.toml",
    ]
    for path in locations:
        if path.exists():
            return path
    return None


def _default_origins() -> list[str]:
    return ["*"]


@dataclass
class ServerConfig:
    """
    Resolved server settings.

    Attributes:
        host: Bind address.
        port: Listening port.
        logs: Enable the access-log middleware.
        log_level: Root log level name.
        debug: Verbose diagnostics (forces DEBUG logging).
        reload: Uvicorn auto-reload (CLI only).
        cors_origins: Origins allowed by the CORS middleware, when enabled.
        middleware: ``[middleware]`` toggles, ``{name: "on"|"off"}``.
        sections: The whole parsed file, for per-middleware sections.
    """

    host: str = "127.0.0.1"
    port: int = 3000
    logs: bool = False
    log_level: str = "INFO"
    debug: bool = False
    reload: bool = False
    cors_origins: list[str] = field(default_factory=_default_origins)
    middleware: dict[str, Any] = field(default_factory=dict)
    sections: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path | None = None, **overrides: Any) -> ServerConfig:
        """
        Build a config from file, environment and explicit overrides.

        Args:
            path: TOML file. None searches the standard locations; a missing
                file there is not an error.
            **overrides: Field values that win over everything else. None
                values are ignored so CLI defaults can be passed through.

        Raises:
            ConfigError: Unreadable file or unknown override field.
        """
        if path is None:
            found = find_config_file()
            data = load_config(found) if found else {}
        else:
            data = load_config(path)

        values: dict[str, Any] = {"middleware": dict(data.get("middleware", {})), "sections": data}
        values.update(_from_toml(data))
        values.update(_from_env(os.environ))

        for key, value in overrides.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigError(f"Unknown configuration field: {key}")
            if value is not None:
                values[key] = value

        return cls(**values)

    def middleware_sections(self) -> dict[str, Any]:
        """Per-middleware options, with ``cors.origins`` taken from ``cors_origins``."""
        sections = dict(self.sections)
        sections["cors"] = {**sections.get("cors", {}), "origins": list(self.cors_origins)}
        return sections

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


def _from_toml(data: Mapping[str, Any]) -> dict[str, Any]:
    server = data.get("server", {})
    values: dict[str, Any] = {}
    if "host" in server:
        values["host"] = str(server["host"])
    if "port" in server:
        values["port"] = _as_port(server["port"])
    if "logs" in server:
        values["logs"] = parse_enabled(server["logs"])
    if "loglevel" in server:
        values["log_level"] = str(server["loglevel"])
    if "debug" in server:
        values["debug"] = parse_enabled(server["debug"])
    if "reload" in server:
        values["reload"] = parse_enabled(server["reload"])
    origins = data.get("cors", {}).get("origins")
    if origins is not None:
        values["cors_origins"] = split_and_strip(origins)
    return values


def _from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if f"{ENV_PREFIX}HOST" in environ:
        values["host"] = environ[f"{ENV_PREFIX}HOST"]
    if f"{ENV_PREFIX}PORT" in environ:
        values["port"] = _as_port(environ[f"{ENV_PREFIX}PORT"])
    if f"{ENV_PREFIX}LOGS" in environ:
        values["logs"] = parse_enabled(environ[f"{ENV_PREFIX}LOGS"])
    if f"{ENV_PREFIX}LOG_LEVEL" in environ:
        values["log_level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"]
    if f"{ENV_PREFIX}DEBUG" in environ:
        values["debug"] = parse_enabled(environ[f"{ENV_PREFIX}DEBUG"])
    if f"{ENV_PREFIX}CORS_ORIGINS" in environ:
        values["cors_origins"] = split_and_strip(environ[f"{ENV_PREFIX}CORS_ORIGINS"])
    return values


def _as_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port: {value!r}") from e
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range: {port}")
    return port
