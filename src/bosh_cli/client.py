"""HTTP client for the director API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from bosh_cli.errors import ApiRequestError, ApiTimeoutError, ApiUnavailableError

logger = logging.getLogger(__name__)

TERMINAL_TASK_STATES = ("done", "error", "cancelled")

PollCallback = Callable[[int, str], None]


@dataclass
class ApiClient:
    target: str
    username: str
    password: str
    timeout: float = 30.0
    retries: int = 2
    poll_interval: float = 1.0
    max_polls: int | None = None

    def __post_init__(self) -> None:
        try:
            import requests
            from requests.adapters import HTTPAdapter
            from urllib3.util.retry import Retry
        except Exception as exc:  # pragma: no cover
            raise ApiUnavailableError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()
        self._session.auth = (self.username, self.password)
        retry = Retry(
            total=max(0, int(self.retries)),
            connect=max(0, int(self.retries)),
            read=max(0, int(self.retries)),
            status=max(0, int(self.retries)),
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_factor=0.2,
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.target.rstrip('/')}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_payload: dict | None = None,
        data: object | None = None,
        headers: dict | None = None,
    ):
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=json_payload,
                data=data,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except Exception as exc:
            raise ApiUnavailableError(str(exc)) from exc

        if response.status_code >= 400:
            try:
                body: object | None = response.json()
            except Exception:
                body = response.text
            if isinstance(body, dict) and isinstance(body.get("description"), str):
                detail = body["description"]
            else:
                detail = response.text
            raise ApiRequestError(
                f"director request failed: {response.status_code} {detail}".rstrip(),
                status_code=response.status_code,
                body=body,
            )
        return response

    def _task_location(self, response) -> str:
        location = response.headers.get("Location")
        if response.status_code != 302 or not location:
            raise ApiRequestError(
                f"director did not return a task location (status {response.status_code})",
                status_code=response.status_code,
            )
        return location

    def _upload_tarball(self, endpoint: str, tarball_path: str | Path) -> str:
        headers = {"Content-Type": "application/x-compressed"}
        with Path(tarball_path).open("rb") as body:
            response = self._request("POST", endpoint, data=body, headers=headers)
        return self._task_location(response)

    def create_user(self, username: str, password: str) -> None:
        self._request(
            "POST",
            "/users",
            json_payload={"username": username, "password": password},
        )

    def upload_stemcell(self, tarball_path: str | Path) -> str:
        return self._upload_tarball("/stemcells", tarball_path)

    def upload_release(self, tarball_path: str | Path) -> str:
        return self._upload_tarball("/releases", tarball_path)

    def get_task_state(self, location: str) -> str:
        payload = self._request("GET", location).json()
        return str(payload.get("state", "unknown"))

    def poll_task(self, location: str, *, callback: PollCallback | None = None) -> str:
        """Block until the task at ``location`` reaches a terminal state.

        ``callback`` receives the poll number (starting at 1) and the state
        observed on that poll.
        """
        poll_number = 0
        while True:
            poll_number += 1
            state = self.get_task_state(location)
            logger.debug("task %s state=%s poll=%d", location, state, poll_number)
            if callback is not None:
                callback(poll_number, state)
            if state in TERMINAL_TASK_STATES:
                return state
            if self.max_polls is not None and poll_number >= self.max_polls:
                raise ApiTimeoutError(
                    f"timed out waiting for task: {location} ({poll_number} polls)"
                )
            time.sleep(max(0.0, self.poll_interval))


__all__ = ["ApiClient", "TERMINAL_TASK_STATES"]
