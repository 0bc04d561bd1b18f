"""Marker substitution and template tree scanning."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Collection, Mapping

from .config import DEFAULT_MARKERS, MarkerTable, Parameter
from .errors import InstallerGeneratorError, TemplateSourceError
from .metadata import SIDECAR_SUFFIX

__all__ = [
    "MarkerSubstitutor",
    "TemplateEntry",
    "TemplateKind",
    "TemplateRenderingError",
    "scan_template_tree",
]

LOGGER = logging.getLogger(__name__)


class TemplateRenderingError(InstallerGeneratorError):
    """Raised when the substitutor cannot provide a value for a marker."""


class TemplateKind(str, Enum):
    """How an entry of the template tree is materialised."""

    DIRECTORY = "directory"
    TEXT = "text"
    OPAQUE = "opaque"


@dataclass(frozen=True, slots=True)
class TemplateEntry:
    """A single path of the template tree.

    ``relative_path`` uses forward slashes and is relative to the template
    root. ``content`` is only populated for :attr:`TemplateKind.TEXT` entries.
    """

    relative_path: str
    kind: TemplateKind
    source: Path
    content: str | None = None
    suffix_length: int = 0

    @property
    def output_path(self) -> str:
        if self.kind is TemplateKind.TEXT and self.suffix_length:
            return self.relative_path[: -self.suffix_length]
        return self.relative_path


def _read_template_text(source: Path) -> str:
    try:
        return source.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TemplateSourceError(f"template '{source}' is not valid UTF-8 text") from exc


def scan_template_tree(root: str | Path, *, text_suffix: str = ".txt") -> tuple[TemplateEntry, ...]:
    """Snapshot every directory and file below ``root``.

    Files whose name ends with ``text_suffix`` (case-insensitive) are text
    templates and are read and decoded as UTF-8 immediately, so an unreadable
    template raises :class:`TemplateSourceError` before anything is written.
    Sidecar files are not part of the tree.
    """

    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(root)

    suffix = text_suffix.lower()
    entries: list[TemplateEntry] = []
    for source in sorted(root.rglob("*")):
        if source.name.endswith(SIDECAR_SUFFIX):
            continue
        relative = source.relative_to(root).as_posix()
        if source.is_dir():
            entries.append(TemplateEntry(relative, TemplateKind.DIRECTORY, source))
        elif source.name.lower().endswith(suffix) and len(source.name) > len(suffix):
            entries.append(
                TemplateEntry(
                    relative,
                    TemplateKind.TEXT,
                    source,
                    content=_read_template_text(source),
                    suffix_length=len(suffix),
                )
            )
        else:
            entries.append(TemplateEntry(relative, TemplateKind.OPAQUE, source))

    LOGGER.debug("scanned template tree root=%s entries=%d", root, len(entries))
    return tuple(entries)


@dataclass(slots=True)
class MarkerSubstitutor:
    """Replace ``\\!<Identifier>`` markers with parameter values.

    All markers are located in one pass over the input, so text inserted for a
    marker is never scanned again. A display name that happens to contain
    ``\\!<PkgAuthor>`` is therefore written out literally.
    """

    markers: MarkerTable = field(default=DEFAULT_MARKERS)
    _pattern: re.Pattern[str] = field(init=False, repr=False)
    _by_token: dict[str, Parameter] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_token = {spec.token: spec.parameter for spec in self.markers.parameters}
        tokens = [*self._by_token, self.markers.namespace_token]
        self._pattern = re.compile("|".join(re.escape(token) for token in tokens))

    def substitute(
        self,
        text: str,
        values: Mapping[Parameter, str | None],
        namespace: str,
        *,
        required: Collection[Parameter] = (),
    ) -> str:
        """Render ``text`` with ``values`` and ``namespace``.

        Parameters
        ----------
        text:
            Template contents.
        values:
            Raw parameter values. Missing or ``None`` values are written as an
            empty string.
        namespace:
            Value for the namespace marker.
        required:
            Parameters that must have a non-empty value. A marker for one of
            them without a value raises :class:`TemplateRenderingError`.
        """

        namespace_token = self.markers.namespace_token

        def replace(match: re.Match[str]) -> str:
            token = match.group(0)
            if token == namespace_token:
                return namespace

            parameter = self._by_token[token]
            value = values.get(parameter)
            if not value:
                if parameter in required:
                    raise TemplateRenderingError(f"missing value for '{parameter.value}'")
                return ""
            return value

        return self._pattern.sub(replace, text)

    def replace_guid(self, text: str, guid: str) -> str:
        """Replace the reference GUID marker in ``text``."""

        return text.replace(self.markers.guid_token, guid)

    def render_file(
        self,
        template_path: str | Path,
        values: Mapping[Parameter, str | None],
        namespace: str,
        *,
        target: str | Path | None = None,
    ) -> str:
        """Render ``template_path`` and optionally write the result to ``target``."""

        template_path = Path(template_path)
        if not template_path.is_file():
            raise FileNotFoundError(template_path)

        rendered = self.substitute(template_path.read_bytes().decode("utf-8"), values, namespace)

        if target is not None:
            target_path = Path(target)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_bytes(rendered.encode("utf-8"))

        return rendered
