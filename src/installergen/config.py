"""Parameter, marker and settings definitions shared by the generator and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from itertools import permutations
from pathlib import Path
from typing import Mapping

__all__ = [
    "DEFAULT_MARKERS",
    "GeneratorSettings",
    "InstallerParameters",
    "MarkerSpec",
    "MarkerTable",
    "Parameter",
    "marker_token",
]


def marker_token(identifier: str) -> str:
    """Return the literal marker written in templates for ``identifier``."""

    return f"\\!<{identifier}>"


class Parameter(str, Enum):
    """User supplied values that can be substituted into templates."""

    PACKAGE_NAME = "PkgName"
    VERSION = "PkgVer"
    DISPLAY_NAME = "PkgDisplayName"
    AUTHOR_NAME = "PkgAuthor"

    @property
    def token(self) -> str:
        return marker_token(self.value)


@dataclass(frozen=True, slots=True)
class MarkerSpec:
    """Associates a :class:`Parameter` with its user facing label."""

    parameter: Parameter
    label: str
    description: str

    @property
    def token(self) -> str:
        return self.parameter.token


@dataclass(frozen=True, slots=True)
class MarkerTable:
    """The complete set of markers understood by the substitutor.

    Attributes
    ----------
    parameters:
        One :class:`MarkerSpec` per substitutable parameter, in display order.
    namespace_identifier:
        Identifier of the marker replaced with the derived namespace.
    guid_identifier:
        Identifier of the marker replaced with the reference asset GUID once
        the staged files have been indexed.
    """

    parameters: tuple[MarkerSpec, ...]
    namespace_identifier: str = "NameSpace"
    guid_identifier: str = "RepoTblSrcGuid"

    def __post_init__(self) -> None:
        tokens = self.tokens()
        if len(set(tokens)) != len(tokens):
            raise ValueError("marker tokens must be unique")
        for first, second in permutations(tokens, 2):
            if first in second:
                raise ValueError(f"marker token {first!r} overlaps {second!r}")

    @property
    def namespace_token(self) -> str:
        return marker_token(self.namespace_identifier)

    @property
    def guid_token(self) -> str:
        return marker_token(self.guid_identifier)

    def tokens(self) -> tuple[str, ...]:
        """Return every token in the table, parameters first."""

        return tuple(spec.token for spec in self.parameters) + (
            self.namespace_token,
            self.guid_token,
        )

    def spec_for(self, parameter: Parameter) -> MarkerSpec:
        for spec in self.parameters:
            if spec.parameter is parameter:
                return spec
        raise KeyError(parameter)


DEFAULT_MARKERS = MarkerTable(
    parameters=(
        MarkerSpec(
            Parameter.PACKAGE_NAME,
            "Package name",
            "Package name of the generated package (com.xxx.yyy form)",
        ),
        MarkerSpec(
            Parameter.VERSION,
            "Version",
            "Version of the generated package (major.minor.patch form)",
        ),
        MarkerSpec(
            Parameter.DISPLAY_NAME,
            "Display name",
            "Name shown for the generated package in the package manager",
        ),
        MarkerSpec(
            Parameter.AUTHOR_NAME,
            "Author",
            "Author of the generated package",
        ),
    )
)


_FIELD_BY_PARAMETER = {
    Parameter.PACKAGE_NAME: "package_name",
    Parameter.VERSION: "version",
    Parameter.DISPLAY_NAME: "display_name",
    Parameter.AUTHOR_NAME: "author_name",
}


@dataclass(frozen=True, slots=True)
class InstallerParameters:
    """Raw values entered for a generation run.

    Values are free-form until they pass :func:`installergen.validation.validate_parameters`;
    the generator reads them but never changes them.
    """

    package_name: str = ""
    version: str = ""
    display_name: str = ""
    author_name: str = ""

    @classmethod
    def defaults(cls) -> "InstallerParameters":
        """Return the values offered to a user before any editing."""

        return cls(
            package_name="com.author.package_name_installer",
            version="1.0.0",
            display_name="Package Name Installer",
            author_name="Author",
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str | Parameter, str | None]) -> "InstallerParameters":
        """Build parameters from a mapping keyed by parameter or field name.

        Keys may be :class:`Parameter` members, marker identifiers such as
        ``"PkgName"`` or field names such as ``"package_name"``. ``None`` values
        are stored as empty strings.
        """

        field_names = {item.name for item in fields(cls)}
        resolved: dict[str, str] = {}
        for key, value in values.items():
            if isinstance(key, Parameter):
                name = _FIELD_BY_PARAMETER[key]
            elif key in field_names:
                name = key
            else:
                try:
                    name = _FIELD_BY_PARAMETER[Parameter(key)]
                except ValueError as exc:
                    raise KeyError(f"unknown parameter '{key}'") from exc
            resolved[name] = "" if value is None else str(value)
        return cls(**resolved)

    def get(self, parameter: Parameter) -> str:
        return getattr(self, _FIELD_BY_PARAMETER[parameter])

    def context(self) -> Mapping[Parameter, str]:
        """Return a mapping compatible with :class:`~installergen.template.MarkerSubstitutor`."""

        return {parameter: self.get(parameter) for parameter in Parameter}


@dataclass(slots=True)
class GeneratorSettings:
    """Locations and knobs used by :class:`~installergen.materializer.PackageMaterializer`.

    Attributes
    ----------
    project_root:
        Root of the host project. ``Packages/`` and ``Assets/`` live below it.
    template_root:
        Directory holding the template tree. When omitted the tree is looked up
        at ``Packages/<generator name>/Templates`` where the generator name is
        read from the ``package.json`` inside :attr:`generator_root`.
    generator_root:
        Directory of the generator package itself.
    scratch_parent:
        Parent directory of the scratch workspace. Defaults to
        ``<project_root>/Assets`` so the staged files are visible to the index.
    scratch_name:
        Base name of the scratch workspace directory.
    guid_reference_path:
        Template relative path (suffix stripped) of the file whose GUID is
        written into the generated files.
    text_suffix:
        Suffix identifying text templates. It is removed from output names.
    copy_opaque:
        Copy files that are not text templates verbatim instead of skipping
        them.
    """

    project_root: Path
    template_root: Path | None = None
    generator_root: Path | None = None
    scratch_parent: Path | None = None
    scratch_name: str = "InstallerGenTemp"
    guid_reference_path: str = "Core/Data/GitRepositoryTable.cs"
    text_suffix: str = ".txt"
    copy_opaque: bool = False
    markers: MarkerTable = field(default=DEFAULT_MARKERS)

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        if self.template_root is not None:
            self.template_root = Path(self.template_root)
        if self.generator_root is not None:
            self.generator_root = Path(self.generator_root)
        if self.scratch_parent is None:
            self.scratch_parent = self.project_root / "Assets"
        else:
            self.scratch_parent = Path(self.scratch_parent)
        if not self.text_suffix.startswith("."):
            raise ValueError("text_suffix must start with '.'")

    @classmethod
    def for_project(
        cls,
        project_root: str | Path,
        *,
        template_root: str | Path | None = None,
        generator_root: str | Path | None = None,
        copy_opaque: bool = False,
    ) -> "GeneratorSettings":
        """Build settings for the project rooted at ``project_root``."""

        root = Path(project_root).expanduser().resolve()
        return cls(
            project_root=root,
            template_root=Path(template_root).expanduser() if template_root else None,
            generator_root=Path(generator_root).expanduser() if generator_root else None,
            copy_opaque=copy_opaque,
        )
