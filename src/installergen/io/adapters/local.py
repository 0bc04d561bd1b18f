"""Local filesystem-backed host adapters for the CLI and tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional
from uuid import uuid4

from ...errors import MetadataParseError
from ...metadata import (
    PACKAGE_DESCRIPTOR_NAME,
    SIDECAR_SUFFIX,
    format_sidecar,
    parse_sidecar_guid,
    sidecar_path,
)
from ..interfaces import IndexService, ReloadLock

LOGGER = logging.getLogger(__name__)

ASSETS_DIRECTORY = "Assets"
PACKAGES_DIRECTORY = "Packages"


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".") or path.name.endswith("~")


def _walk(directory: Path) -> Iterator[Path]:
    for child in sorted(directory.iterdir()):
        if _is_hidden(child) or child.name.endswith(SIDECAR_SUFFIX):
            continue
        yield child
        if child.is_dir():
            yield from _walk(child)


class LocalAssetIndex(IndexService):
    """Index a project directory laid out with ``Assets/`` and ``Packages/``.

    Every file and folder below those roots receives a ``.meta`` sidecar with a
    random GUID on :meth:`refresh`, except the package root folders themselves.
    Existing sidecars are left untouched.
    """

    def __init__(self, project_root: Path | str):
        self._root = Path(project_root)

    @property
    def root(self) -> Path:
        """Project directory backing this index."""

        return self._root

    def refresh(self) -> int:
        """Write sidecars for unindexed assets and return how many were created."""

        created = 0
        for top in (ASSETS_DIRECTORY, PACKAGES_DIRECTORY):
            base = self._root / top
            if not base.is_dir():
                continue
            for path in _walk(base):
                if top == PACKAGES_DIRECTORY and path.parent == base:
                    continue
                meta = sidecar_path(path)
                if meta.exists():
                    continue
                meta.write_text(format_sidecar(uuid4().hex), encoding="utf-8")
                created += 1
        LOGGER.debug("index refreshed root=%s created=%d", self._root, created)
        return created

    def find_by_path(self, path: str) -> Optional[str]:
        meta = sidecar_path(self._root / path)
        if not meta.is_file():
            return None
        try:
            return parse_sidecar_guid(meta.read_text(encoding="utf-8"))
        except (MetadataParseError, UnicodeDecodeError):
            LOGGER.warning("unreadable sidecar path=%s", meta)
            return None

    def exists_package(self, name: str) -> bool:
        return (self._root / PACKAGES_DIRECTORY / name / PACKAGE_DESCRIPTOR_NAME).is_file()


class LocalReloadLock(ReloadLock):
    """Counting reload lock that records reload requests."""

    def __init__(self) -> None:
        self._depth = 0
        self.reload_requests = 0

    @property
    def paused(self) -> bool:
        return self._depth > 0

    def pause(self) -> None:
        self._depth += 1

    def resume(self) -> None:
        if self._depth == 0:
            raise RuntimeError("resume() called without a matching pause()")
        self._depth -= 1

    def request_reload(self) -> None:
        self.reload_requests += 1


__all__ = ["LocalAssetIndex", "LocalReloadLock"]
