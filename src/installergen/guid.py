"""Lookup of the GUID referenced by generated files."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import MetadataParseError
from .io.interfaces import IndexService
from .metadata import EMPTY_GUID, parse_sidecar_guid, sidecar_path

__all__ = ["resolve_guid"]

LOGGER = logging.getLogger(__name__)


def _guid_from_sidecar(target_file: Path) -> str | None:
    meta = sidecar_path(target_file)
    if not meta.is_file():
        return None
    try:
        guid = parse_sidecar_guid(meta.read_bytes().decode("utf-8"))
    except (MetadataParseError, UnicodeDecodeError) as exc:
        LOGGER.debug("ignoring sidecar path=%s error=%s", meta, exc)
        return None
    if guid == EMPTY_GUID:
        LOGGER.debug("ignoring placeholder guid in sidecar path=%s", meta)
        return None
    return guid


def resolve_guid(
    target_file: str | Path,
    fallback_package_name: str,
    fallback_relative_path: str,
    index: IndexService,
) -> str:
    """Return the GUID of ``target_file``.

    A freshly written file usually already has a sidecar carrying its GUID even
    before the index can answer for it, so the sidecar is consulted first. When
    it is missing, unreadable or holds the all-zero placeholder the index is
    asked for ``Packages/<fallback_package_name>/<fallback_relative_path>``.
    :data:`~installergen.metadata.EMPTY_GUID` is returned when neither source
    knows the file.
    """

    guid = _guid_from_sidecar(Path(target_file))
    if guid is not None:
        return guid

    fallback = f"Packages/{fallback_package_name}/{fallback_relative_path}"
    guid = index.find_by_path(fallback)
    if not guid:
        LOGGER.warning("no guid available target=%s fallback=%s", target_file, fallback)
        return EMPTY_GUID
    return guid
