"""Custom exception types raised while generating installer packages."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationReport


class InstallerGeneratorError(RuntimeError):
    """Base class for every error raised by :mod:`installergen`."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ParameterValidationError(InstallerGeneratorError):
    """Raised when the package name or version does not pass validation."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        super().__init__("; ".join(report.messages()) or "invalid parameters")


class DuplicatePackageError(InstallerGeneratorError):
    """Raised when a package with the requested name already exists."""

    def __init__(self, package_name: str) -> None:
        self.package_name = package_name
        super().__init__(f"package '{package_name}' already exists in the project")


class NamespaceDerivationError(InstallerGeneratorError):
    """Raised when no namespace can be derived from the package name."""


class DestinationNotEmptyError(InstallerGeneratorError):
    """Raised when the output directory already contains files or folders."""

    def __init__(self, destination: Path) -> None:
        self.destination = destination
        super().__init__(f"'{destination}' is not empty")


class MetadataParseError(InstallerGeneratorError):
    """Raised when a package descriptor or sidecar cannot be interpreted."""


class GenerationError(InstallerGeneratorError):
    """Raised when a generation run fails."""


class TemplateSourceError(GenerationError):
    """Raised when the template tree cannot be located or read."""


__all__ = [
    "DestinationNotEmptyError",
    "DuplicatePackageError",
    "GenerationError",
    "InstallerGeneratorError",
    "MetadataParseError",
    "NamespaceDerivationError",
    "ParameterValidationError",
    "TemplateSourceError",
]
