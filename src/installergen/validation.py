"""Validation of the user supplied package name and version."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .config import InstallerParameters
from .errors import DuplicatePackageError, ParameterValidationError
from .io.interfaces import IndexService

__all__ = [
    "MAX_PACKAGE_NAME_LENGTH",
    "MAX_QUIET_PACKAGE_NAME_LENGTH",
    "PackageNameCheck",
    "ValidationReport",
    "check_package_absent",
    "ensure_generatable",
    "validate_package_name",
    "validate_parameters",
    "validate_version",
]

LOGGER = logging.getLogger(__name__)

MAX_PACKAGE_NAME_LENGTH = 214
MAX_QUIET_PACKAGE_NAME_LENGTH = 50

_PACKAGE_NAME_PATTERN = re.compile(r"com\.[a-z0-9][a-z0-9\-_]*(\.[a-z0-9][a-z0-9\-_]*)*")
_VERSION_PATTERN = re.compile(
    r"(0|[1-9][0-9]{0,5})\.(0|[1-9][0-9]{0,5})\.(0|[1-9][0-9]{0,5})"
)


@dataclass(frozen=True, slots=True)
class PackageNameCheck:
    """Outcome of :func:`validate_package_name`."""

    valid: bool
    too_long: bool = False
    warn_length: bool = False

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Combined result of validating a full parameter set."""

    valid: bool
    invalid_name: bool
    warn_length: bool
    invalid_version: bool

    def messages(self) -> list[str]:
        """Return user facing explanations for every problem found."""

        messages: list[str] = []
        if self.invalid_name:
            messages.append(
                "invalid package name: it must start with 'com.<author>.', use only "
                "lowercase letters, digits, '-' and '_', and be at most "
                f"{MAX_PACKAGE_NAME_LENGTH} characters long"
            )
        elif self.warn_length:
            messages.append(
                f"package name is longer than {MAX_QUIET_PACKAGE_NAME_LENGTH} characters; "
                "shorter names are recommended"
            )
        if self.invalid_version:
            messages.append(
                "invalid version: use the 'major.minor.patch' form with each part "
                "between 0 and 999999 and no leading zeros"
            )
        return messages


def validate_package_name(name: str | None) -> PackageNameCheck:
    """Check ``name`` against the package name grammar."""

    if name is None or not name.strip():
        return PackageNameCheck(valid=False)
    if len(name) > MAX_PACKAGE_NAME_LENGTH:
        return PackageNameCheck(valid=False, too_long=True)
    if _PACKAGE_NAME_PATTERN.fullmatch(name) is None:
        return PackageNameCheck(valid=False)
    return PackageNameCheck(valid=True, warn_length=len(name) > MAX_QUIET_PACKAGE_NAME_LENGTH)


def validate_version(version: str | None) -> bool:
    """Return ``True`` when ``version`` is a ``major.minor.patch`` string."""

    if version is None or not version.strip():
        return False
    return _VERSION_PATTERN.fullmatch(version) is not None


def validate_parameters(parameters: InstallerParameters) -> ValidationReport:
    """Validate the package name and version of ``parameters``.

    The length warning is advisory and never makes the report invalid.
    """

    name_check = validate_package_name(parameters.package_name)
    version_ok = validate_version(parameters.version)
    return ValidationReport(
        valid=name_check.valid and version_ok,
        invalid_name=not name_check.valid,
        warn_length=name_check.warn_length,
        invalid_version=not version_ok,
    )


def check_package_absent(name: str | None, index: IndexService) -> bool:
    """Return ``True`` if no package called ``name`` is known to ``index``."""

    if name is None or not name.strip():
        return False
    return not index.exists_package(name)


def ensure_generatable(parameters: InstallerParameters, index: IndexService) -> ValidationReport:
    """Raise unless ``parameters`` may be handed to the generator.

    Returns the validation report so callers can surface the length warning.
    """

    report = validate_parameters(parameters)
    if not report.valid:
        LOGGER.error(
            "parameter validation failed invalid_name=%s invalid_version=%s",
            report.invalid_name,
            report.invalid_version,
        )
        raise ParameterValidationError(report)
    if not check_package_absent(parameters.package_name, index):
        LOGGER.error("package already exists name=%s", parameters.package_name)
        raise DuplicatePackageError(parameters.package_name)
    if report.warn_length:
        LOGGER.warning("long package name length=%d", len(parameters.package_name))
    return report
