"""Session state derived from the global config for one working directory."""

from __future__ import annotations

from pathlib import Path

from bosh_cli.cli.config import Credentials, GlobalConfig, WorkdirConfig


class SessionState:
    """Current target, deployment and credentials for ``workdir``.

    Reads never touch the global record. Mutators attach the working
    directory entry to ``config`` and set ``dirty`` so the caller knows a
    save is due.
    """

    def __init__(self, config: GlobalConfig, workdir: str | Path) -> None:
        self.config = config
        self.workdir = str(workdir)
        self.dirty = False
        self._current = config.workdirs.get(self.workdir) or WorkdirConfig()

    def current_config(self) -> WorkdirConfig:
        return self._current

    def credentials(self) -> Credentials | None:
        target = self._current.target
        if target is None:
            return None
        return self.config.auth.get(target)

    def is_logged_in(self) -> bool:
        return self.credentials() is not None

    def _touch(self) -> None:
        self.config.workdirs[self.workdir] = self._current
        self.dirty = True

    def set_target(self, name: str | None) -> None:
        self._current.target = name
        self._touch()

    def set_deployment(self, name: str) -> None:
        self._current.deployment = name
        self._touch()

    def clear_deployment(self) -> None:
        self._current.deployment = None
        self._touch()

    def store_credentials(self, username: str, password: str) -> Credentials:
        target = self._current.target
        if target is None:
            raise ValueError("cannot store credentials without a target")
        credentials = Credentials(username=username, password=password)
        self.config.auth[target] = credentials
        self._touch()
        return credentials
