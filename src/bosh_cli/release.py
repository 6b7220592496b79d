"""Release tarball verification and upload."""

from __future__ import annotations

from bosh_cli.errors import TarballError
from bosh_cli.tarball import TarballArtifact


class Release(TarballArtifact):
    kind = "release"
    manifest_name = "release.MF"

    def _checks(self):
        return super()._checks() + [
            ("Release properties", self._check_release_properties),
            ("Read packages", lambda: self._check_bundles("packages")),
            ("Read jobs", lambda: self._check_bundles("jobs")),
        ]

    def _check_release_properties(self) -> list[str]:
        return self._check_properties("name", "version")

    def _check_bundles(self, section: str) -> list[str]:
        entries = self.manifest.get(section) or []
        if not isinstance(entries, list):
            return [f"Manifest {section} must be a list"]

        errors: list[str] = []
        label = section[:-1]
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name"):
                errors.append(f"Manifest has a {label} without a name")
                continue
            member = f"{section}/{entry['name']}.tgz"
            if not self.has_member(member):
                errors.append(f"Missing {label} '{entry['name']}'")
                continue
            expected_sha1 = entry.get("sha1")
            if not expected_sha1:
                continue
            try:
                actual_sha1 = self.member_sha1(member)
            except TarballError as exc:
                errors.append(str(exc))
                continue
            if actual_sha1 != str(expected_sha1):
                errors.append(f"{label.capitalize()} '{entry['name']}' checksum mismatch")
        return errors

    def _submit(self, api_client) -> str:
        return api_client.upload_release(self.tarball_path)
