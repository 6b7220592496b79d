"""Stemcell tarball verification and upload."""

from __future__ import annotations

from bosh_cli.tarball import TarballArtifact

STEMCELL_IMAGE = "image"


class Stemcell(TarballArtifact):
    kind = "stemcell"
    manifest_name = "stemcell.MF"

    def _checks(self):
        return super()._checks() + [
            ("Stemcell image file", self._check_image),
            ("Stemcell properties", self._check_stemcell_properties),
        ]

    def _check_image(self) -> list[str]:
        if not self.has_member(STEMCELL_IMAGE):
            return ["Stemcell image file is missing"]
        return []

    def _check_stemcell_properties(self) -> list[str]:
        return self._check_properties("name", "version")

    def _submit(self, api_client) -> str:
        return api_client.upload_stemcell(self.tarball_path)
