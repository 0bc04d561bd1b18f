"""Readers for package descriptors and ``.meta`` sidecar files."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MetadataParseError

__all__ = [
    "EMPTY_GUID",
    "PACKAGE_DESCRIPTOR_NAME",
    "SIDECAR_SUFFIX",
    "PackageDescriptor",
    "format_sidecar",
    "parse_sidecar_guid",
    "read_package_name",
    "read_package_name_from",
    "sidecar_path",
]

LOGGER = logging.getLogger(__name__)

EMPTY_GUID = "0" * 32
PACKAGE_DESCRIPTOR_NAME = "package.json"
SIDECAR_SUFFIX = ".meta"

_SIDECAR_PATTERN = re.compile(r"fileFormatVersion: \d+\nguid: (?P<guid>[0-9a-fA-F]{32})")


class PackageDescriptor(BaseModel):
    """The subset of ``package.json`` the generator cares about."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., description="Registered name of the package.")


def read_package_name(json_text: str) -> str:
    """Return the ``name`` declared by a package descriptor.

    Raises
    ------
    MetadataParseError
        If ``json_text`` is not a JSON object with a string ``name`` field.
    """

    try:
        descriptor = PackageDescriptor.model_validate_json(json_text, strict=True)
    except ValidationError as exc:
        raise MetadataParseError(f"malformed package descriptor: {exc.error_count()} error(s)") from exc
    return descriptor.name


def read_package_name_from(path: str | Path) -> str | None:
    """Read the package name from a descriptor file or the directory holding one.

    Returns ``None`` when the descriptor is missing or malformed.
    """

    descriptor_path = Path(path)
    if descriptor_path.is_dir():
        descriptor_path = descriptor_path / PACKAGE_DESCRIPTOR_NAME
    if not descriptor_path.is_file():
        LOGGER.warning("package descriptor not found path=%s", descriptor_path)
        return None

    try:
        return read_package_name(descriptor_path.read_text(encoding="utf-8"))
    except (MetadataParseError, UnicodeDecodeError) as exc:
        LOGGER.warning("unreadable package descriptor path=%s error=%s", descriptor_path, exc)
        return None


def sidecar_path(path: str | Path) -> Path:
    """Return the sidecar location for ``path``."""

    path = Path(path)
    return path.with_name(path.name + SIDECAR_SUFFIX)


def parse_sidecar_guid(text: str) -> str:
    """Extract the GUID recorded at the start of a sidecar file.

    Raises
    ------
    MetadataParseError
        If the text does not start with the ``fileFormatVersion``/``guid`` header.
    """

    match = _SIDECAR_PATTERN.match(text)
    if match is None:
        raise MetadataParseError("sidecar does not start with a fileFormatVersion/guid header")
    return match.group("guid")


def format_sidecar(guid: str, *, file_format_version: int = 2) -> str:
    return f"fileFormatVersion: {file_format_version}\nguid: {guid}\n"

