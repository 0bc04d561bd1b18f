"""Generate installer packages from a template tree.

The package validates the package name and version entered by a user, derives
a code namespace from the package name, substitutes ``\\!<Identifier>`` markers
in text templates and assembles the result in a scratch workspace before
moving it into an empty destination directory. Host services (the asset index
and the reload lock) are injected; local filesystem implementations are
available in :mod:`installergen.io.adapters`.
"""

from __future__ import annotations

from .config import (
    DEFAULT_MARKERS,
    GeneratorSettings,
    InstallerParameters,
    MarkerSpec,
    MarkerTable,
    Parameter,
)
from .errors import (
    DestinationNotEmptyError,
    DuplicatePackageError,
    GenerationError,
    InstallerGeneratorError,
    MetadataParseError,
    NamespaceDerivationError,
    ParameterValidationError,
    TemplateSourceError,
)
from .guid import resolve_guid
from .materializer import GenerationResult, GenerationState, PackageMaterializer
from .metadata import read_package_name
from .naming import derive_namespace
from .template import MarkerSubstitutor, TemplateRenderingError, scan_template_tree
from .validation import (
    check_package_absent,
    validate_package_name,
    validate_parameters,
    validate_version,
)

__all__ = [
    "DEFAULT_MARKERS",
    "DestinationNotEmptyError",
    "DuplicatePackageError",
    "GenerationError",
    "GenerationResult",
    "GenerationState",
    "GeneratorSettings",
    "InstallerGeneratorError",
    "InstallerParameters",
    "MarkerSpec",
    "MarkerSubstitutor",
    "MarkerTable",
    "MetadataParseError",
    "NamespaceDerivationError",
    "PackageMaterializer",
    "Parameter",
    "ParameterValidationError",
    "TemplateRenderingError",
    "TemplateSourceError",
    "check_package_absent",
    "derive_namespace",
    "read_package_name",
    "resolve_guid",
    "scan_template_tree",
    "validate_package_name",
    "validate_parameters",
    "validate_version",
]

__version__ = "0.1.0"
