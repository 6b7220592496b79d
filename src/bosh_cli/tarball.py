"""Shared validation and upload flow for stemcell and release tarballs."""

from __future__ import annotations

import hashlib
import logging
import os
import tarfile
from pathlib import Path
from typing import Any, Callable

import yaml

from bosh_cli.client import PollCallback
from bosh_cli.errors import BoshSDKError, TarballError

logger = logging.getLogger(__name__)

CheckCallback = Callable[[str, bool], None]


def _normalize_member_name(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name.rstrip("/")


class TarballArtifact:
    """Base class for tarballs that are verified locally and then uploaded.

    Subclasses set ``kind``/``manifest_name`` and extend ``_checks`` with
    their own named checks. Each check returns a list of error strings; an
    empty list means the check passed.
    """

    kind = "artifact"
    manifest_name = "manifest.MF"

    def __init__(self, tarball_path: str | Path) -> None:
        self.tarball_path = str(tarball_path)
        self.manifest: dict[str, Any] = {}
        self._members: dict[str, tarfile.TarInfo] = {}
        self._errors: list[str] = []
        self._validated = False

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def valid(self) -> bool:
        return self._validated and not self._errors

    def _checks(self) -> list[tuple[str, Callable[[], list[str]]]]:
        return [
            ("File exists and readable", self._check_readable),
            ("Extract tarball", self._check_extract),
            ("Manifest exists", self._check_manifest),
        ]

    def validate(self, callback: CheckCallback | None = None) -> None:
        self._errors = []
        for name, check in self._checks():
            errors = check()
            passed = not errors
            logger.debug("%s check %r passed=%s", self.kind, name, passed)
            if callback is not None:
                callback(name, passed)
            if not passed:
                self._errors.extend(errors)
                break
        self._validated = True

    def _check_readable(self) -> list[str]:
        path = Path(self.tarball_path)
        if not path.is_file() or not os.access(path, os.R_OK):
            return [f"Cannot find {self.kind} tarball '{self.tarball_path}'"]
        return []

    def _check_extract(self) -> list[str]:
        try:
            with tarfile.open(self.tarball_path, "r:*") as archive:
                self._members = {
                    _normalize_member_name(member.name): member for member in archive.getmembers()
                }
        except (tarfile.TarError, OSError) as exc:
            return [f"Cannot extract tarball '{self.tarball_path}': {exc}"]
        return []

    def _check_manifest(self) -> list[str]:
        if self.manifest_name not in self._members:
            return [f"Cannot find {self.kind} manifest '{self.manifest_name}'"]
        try:
            payload = yaml.safe_load(self.read_member(self.manifest_name))
        except (TarballError, yaml.YAMLError) as exc:
            return [f"Cannot parse {self.kind} manifest: {exc}"]
        if not isinstance(payload, dict):
            return [f"{self.kind.capitalize()} manifest must be a mapping"]
        self.manifest = payload
        return []

    def _check_properties(self, *names: str) -> list[str]:
        return [
            f"Manifest doesn't contain {self.kind} {name}"
            for name in names
            if self.manifest.get(name) in (None, "")
        ]

    def has_member(self, name: str) -> bool:
        return name in self._members

    def read_member(self, name: str) -> bytes:
        member = self._members.get(name)
        if member is None:
            raise TarballError(f"no such entry in tarball: {name}")
        try:
            with tarfile.open(self.tarball_path, "r:*") as archive:
                handle = archive.extractfile(member)
                if handle is None:
                    raise TarballError(f"tarball entry is not a regular file: {name}")
                return handle.read()
        except (tarfile.TarError, OSError) as exc:
            raise TarballError(f"cannot read {name} from tarball: {exc}") from exc

    def member_sha1(self, name: str) -> str:
        return hashlib.sha1(self.read_member(name)).hexdigest()

    def _submit(self, api_client) -> str:
        raise NotImplementedError

    def upload(self, api_client, progress: PollCallback | None = None) -> tuple[bool, str]:
        if not self._validated:
            self.validate()
        if not self.valid:
            return False, f"{self.kind.capitalize()} is invalid, please fix, verify and upload again"

        try:
            location = self._submit(api_client)
            state = api_client.poll_task(location, callback=progress)
        except (BoshSDKError, OSError) as exc:
            return False, f"Unable to upload {self.kind}: {exc}"

        if state != "done":
            return False, f"{self.kind.capitalize()} upload failed: task state is '{state}'"
        return True, f"{self.kind.capitalize()} uploaded"
