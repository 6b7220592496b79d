"""Deployment manifests discovered under a working directory."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEPLOYMENTS_DIR = "deployments"
MANIFEST_SUFFIX = ".yml"


class Deployment:
    """A named manifest at ``<work_dir>/deployments/<name>.yml``."""

    def __init__(self, work_dir: str | Path, name: str) -> None:
        self.work_dir = Path(work_dir)
        self.name = name

    def __repr__(self) -> str:
        return f"Deployment(work_dir={str(self.work_dir)!r}, name={self.name!r})"

    @property
    def path(self) -> str:
        return str(self.work_dir / DEPLOYMENTS_DIR / f"{self.name}{MANIFEST_SUFFIX}")

    def manifest_exists(self) -> bool:
        return Path(self.path).is_file()

    @property
    def target(self) -> str | None:
        """Target recorded in the manifest, or None when it cannot be read."""
        try:
            payload = yaml.safe_load(Path(self.path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.debug("cannot read deployment manifest %s: %s", self.path, exc)
            return None
        if not isinstance(payload, dict):
            return None
        target = payload.get("target")
        return str(target) if target is not None else None

    @classmethod
    def all(cls, work_dir: str | Path) -> list["Deployment"]:
        root = Path(work_dir) / DEPLOYMENTS_DIR
        if not root.is_dir():
            return []
        return [
            cls(work_dir, manifest.stem)
            for manifest in sorted(root.glob(f"*{MANIFEST_SUFFIX}"))
            if manifest.is_file()
        ]
