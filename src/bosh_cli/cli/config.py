"""Persistent per-directory configuration for the bosh CLI."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".bosh_config"
CONFIG_PATH_ENV_VAR = "BOSH_CONFIG"


class ConfigError(ValueError):
    """Raised when the config file cannot be read, written or parsed."""


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


@dataclass
class WorkdirConfig:
    target: str | None = None
    deployment: str | None = None


@dataclass
class GlobalConfig:
    workdirs: dict[str, WorkdirConfig] = field(default_factory=dict)
    auth: dict[str, Credentials] = field(default_factory=dict)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path:
        return Path(path)
    env_path = os.getenv(CONFIG_PATH_ENV_VAR)
    if env_path and env_path.strip():
        return Path(env_path.strip()).expanduser()
    return DEFAULT_CONFIG_PATH


def _optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string")
    return value


def _parse_workdirs(raw: Any) -> dict[str, WorkdirConfig]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("workdirs must be a mapping")
    workdirs: dict[str, WorkdirConfig] = {}
    for workdir, entry in raw.items():
        if entry is None:
            entry = {}
        if not isinstance(entry, dict):
            raise ConfigError(f"config for {workdir} must be a mapping")
        workdirs[str(workdir)] = WorkdirConfig(
            target=_optional_str(entry.get("target"), "target"),
            deployment=_optional_str(entry.get("deployment"), "deployment"),
        )
    return workdirs


def _parse_auth(raw: Any) -> dict[str, Credentials]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("auth must be a mapping")
    auth: dict[str, Credentials] = {}
    for target, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"credentials for {target} must be a mapping")
        username = entry.get("username")
        password = entry.get("password")
        if not isinstance(username, str) or not isinstance(password, str):
            raise ConfigError(f"credentials for {target} must contain username and password")
        auth[str(target)] = Credentials(username=username, password=password)
    return auth


def _serialize(config: GlobalConfig) -> dict[str, Any]:
    workdirs: dict[str, Any] = {}
    for workdir, entry in config.workdirs.items():
        record: dict[str, str] = {}
        if entry.target is not None:
            record["target"] = entry.target
        if entry.deployment is not None:
            record["deployment"] = entry.deployment
        workdirs[workdir] = record
    auth = {
        target: {"username": creds.username, "password": creds.password}
        for target, creds in config.auth.items()
    }
    return {"workdirs": workdirs, "auth": auth}


class ConfigStore:
    """Owns the on-disk config file.

    The file is read once per store and cached; every save rewrites the
    whole record. There is no locking, so concurrent writers race and the
    last save wins.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = resolve_config_path(path)
        self._config: GlobalConfig | None = None

    def _create_empty(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError:
            return
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(yaml.safe_dump(_serialize(GlobalConfig()), default_flow_style=False))
        if os.name == "posix":
            self.path.chmod(0o600)
        logger.debug("created empty config file %s", self.path)

    def load(self) -> GlobalConfig:
        if self._config is not None:
            return self._config

        try:
            if not self.path.exists():
                self._create_empty()
            raw = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigError(f"malformed config file: {self.path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"cannot read config file: {exc}") from exc

        try:
            parsed = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"malformed config file: {self.path}: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ConfigError(f"malformed config file: {self.path}")

        self._config = GlobalConfig(
            workdirs=_parse_workdirs(parsed.get("workdirs")),
            auth=_parse_auth(parsed.get("auth")),
        )
        logger.debug(
            "loaded config %s (%d workdirs, %d auth entries)",
            self.path,
            len(self._config.workdirs),
            len(self._config.auth),
        )
        return self._config

    def save(self, config: GlobalConfig) -> None:
        content = yaml.safe_dump(_serialize(config), default_flow_style=False)
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot save config: {exc}") from exc
        self._config = config
        logger.debug("saved config %s", self.path)
