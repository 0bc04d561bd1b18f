"""Generation of installer packages from a template tree."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .config import GeneratorSettings, InstallerParameters
from .errors import (
    DestinationNotEmptyError,
    GenerationError,
    NamespaceDerivationError,
    TemplateSourceError,
)
from .guid import resolve_guid
from .io.interfaces import IndexService, ReloadLock, reload_paused
from .metadata import read_package_name_from, sidecar_path
from .naming import derive_namespace
from .template import MarkerSubstitutor, TemplateEntry, TemplateKind, scan_template_tree

__all__ = [
    "GenerationResult",
    "GenerationState",
    "PackageMaterializer",
    "ScratchWorkspace",
    "resolve_template_root",
]

LOGGER = logging.getLogger(__name__)


class GenerationState(str, Enum):
    """Stages a generation run moves through."""

    IDLE = "idle"
    VALIDATING = "validating"
    STAGING_FILES = "staging_files"
    INDEXED = "indexed"
    RESOLVING_GUID = "resolving_guid"
    REWRITING_GUID = "rewriting_guid"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class GenerationResult(BaseModel):
    """Summary of a successful generation run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    destination: Path = Field(..., description="Directory that received the package.")
    namespace: str = Field(..., description="Namespace substituted into the templates.")
    guid: str = Field(..., description="GUID written in place of the reference marker.")
    generated_files: List[str] = Field(default_factory=list, description="Rendered text templates, destination relative.")
    moved: List[str] = Field(default_factory=list, description="Top-level entries moved into the destination.")
    warnings: List[str] = Field(default_factory=list, description="Non fatal problems noticed during the run.")


@dataclass(slots=True)
class ScratchWorkspace:
    """Temporary directory the package is assembled in before it is moved."""

    path: Path

    @classmethod
    def create(cls, parent: Path, base_name: str) -> "ScratchWorkspace":
        """Create a fresh directory named ``base_name`` below ``parent``.

        A random suffix is appended when the name is already taken.
        """

        parent.mkdir(parents=True, exist_ok=True)
        name = base_name
        while True:
            candidate = parent / name
            try:
                candidate.mkdir()
            except FileExistsError:
                name = f"{base_name}{uuid4().hex}"
                continue
            LOGGER.debug("created scratch workspace path=%s", candidate)
            return cls(candidate)

    @property
    def sidecar(self) -> Path:
        return sidecar_path(self.path)

    def cleanup(self) -> None:
        """Remove the workspace and its sidecar, logging instead of raising."""

        try:
            if self.path.exists():
                shutil.rmtree(self.path)
        except OSError:
            LOGGER.exception("failed to remove scratch workspace path=%s", self.path)
        try:
            self.sidecar.unlink(missing_ok=True)
        except OSError:
            LOGGER.exception("failed to remove scratch sidecar path=%s", self.sidecar)


def resolve_template_root(settings: GeneratorSettings) -> Path:
    """Return the template directory configured by ``settings``.

    Without an explicit ``template_root`` the templates are expected at
    ``Packages/<generator name>/Templates`` with the generator name taken from
    the generator's own package descriptor.
    """

    if settings.template_root is not None:
        return settings.template_root
    if settings.generator_root is None:
        raise FileNotFoundError("neither a template root nor a generator root is configured")

    generator_name = read_package_name_from(settings.generator_root)
    if generator_name is None:
        raise FileNotFoundError(f"cannot determine the generator package name from {settings.generator_root}")
    return settings.project_root / "Packages" / generator_name / "Templates"


def _is_empty_directory(path: Path) -> bool:
    return not any(path.iterdir())


@dataclass(slots=True)
class PackageMaterializer:
    """Render a template tree into an empty destination directory.

    Callers are expected to validate the parameters and to make sure the
    package does not exist yet (see :func:`installergen.validation.ensure_generatable`)
    before calling :meth:`generate`.
    """

    index: IndexService
    lock: ReloadLock
    settings: GeneratorSettings
    substitutor: MarkerSubstitutor | None = None
    history: list[GenerationState] = field(default_factory=list)
    _substitutor: MarkerSubstitutor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._substitutor = self.substitutor or MarkerSubstitutor(self.settings.markers)
        self.history = [GenerationState.IDLE]

    @property
    def state(self) -> GenerationState:
        return self.history[-1]

    def _enter(self, state: GenerationState) -> None:
        LOGGER.debug("generation state %s -> %s", self.state.value, state.value)
        self.history.append(state)

    def generate(self, destination: str | Path, parameters: InstallerParameters) -> GenerationResult:
        """Generate the installer package for ``parameters`` inside ``destination``."""

        self.history = [GenerationState.IDLE]
        destination = Path(destination)

        self._enter(GenerationState.VALIDATING)
        try:
            namespace = derive_namespace(parameters.package_name)
        except NamespaceDerivationError:
            LOGGER.error("invalid package name name=%r", parameters.package_name)
            self._enter(GenerationState.FAILED)
            raise

        if not destination.is_dir():
            self._enter(GenerationState.FAILED)
            raise FileNotFoundError(destination)
        if not _is_empty_directory(destination):
            LOGGER.error("destination is not empty destination=%s", destination)
            self._enter(GenerationState.FAILED)
            raise DestinationNotEmptyError(destination)

        try:
            tree = scan_template_tree(
                resolve_template_root(self.settings),
                text_suffix=self.settings.text_suffix,
            )
        except OSError as exc:
            LOGGER.error("template tree unavailable error=%s", exc)
            self._enter(GenerationState.FAILED)
            raise TemplateSourceError(f"cannot read the template tree: {exc}") from exc
        except TemplateSourceError as exc:
            LOGGER.error("template tree unreadable error=%s", exc)
            self._enter(GenerationState.FAILED)
            raise

        try:
            with reload_paused(self.lock):
                workspace = ScratchWorkspace.create(self.settings.scratch_parent, self.settings.scratch_name)
                try:
                    result = self._run(workspace, tree, destination, parameters, namespace)
                finally:
                    workspace.cleanup()
                    self._refresh_quietly()
        except (OSError, UnicodeError) as exc:
            LOGGER.error("generation failed destination=%s error=%s", destination, exc)
            self._enter(GenerationState.FAILED)
            raise GenerationError(f"failed to generate the package in '{destination}'") from exc
        except Exception:
            self._enter(GenerationState.FAILED)
            raise

        self.lock.request_reload()
        self._enter(GenerationState.DONE)
        LOGGER.info(
            "generated package name=%s destination=%s files=%d",
            parameters.package_name,
            destination,
            len(result.generated_files),
        )
        return result

    def _run(
        self,
        workspace: ScratchWorkspace,
        tree: Iterable[TemplateEntry],
        destination: Path,
        parameters: InstallerParameters,
        namespace: str,
    ) -> GenerationResult:
        warnings: list[str] = []

        self._enter(GenerationState.STAGING_FILES)
        generated = self._stage(workspace.path, tree, parameters, namespace, warnings)

        self.index.refresh()
        self._enter(GenerationState.INDEXED)

        self._enter(GenerationState.RESOLVING_GUID)
        reference = self.settings.guid_reference_path
        guid = resolve_guid(workspace.path / reference, parameters.package_name, reference, self.index)

        self._enter(GenerationState.REWRITING_GUID)
        for relative in generated:
            target = workspace.path / relative
            text = target.read_bytes().decode("utf-8")
            target.write_bytes(self._substitutor.replace_guid(text, guid).encode("utf-8"))

        self._enter(GenerationState.FINALIZING)
        moved = self._move_contents(workspace.path, destination)

        return GenerationResult(
            destination=destination,
            namespace=namespace,
            guid=guid,
            generated_files=generated,
            moved=moved,
            warnings=warnings,
        )

    def _stage(
        self,
        root: Path,
        tree: Iterable[TemplateEntry],
        parameters: InstallerParameters,
        namespace: str,
        warnings: list[str],
    ) -> list[str]:
        values = parameters.context()
        staged: set[str] = set()
        generated: list[str] = []

        for entry in tree:
            output = entry.output_path
            if output in staged:
                continue
            target = root / output

            if entry.kind is TemplateKind.DIRECTORY:
                target.mkdir(parents=True, exist_ok=True)
            elif entry.kind is TemplateKind.TEXT:
                if entry.content is None:
                    raise GenerationError(f"template '{entry.relative_path}' was scanned without its content")
                target.parent.mkdir(parents=True, exist_ok=True)
                rendered = self._substitutor.substitute(entry.content, values, namespace)
                target.write_bytes(rendered.encode("utf-8"))
                generated.append(output)
            elif self.settings.copy_opaque:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(entry.source, target)
            else:
                LOGGER.debug("skipping non-template file path=%s", entry.relative_path)
                warnings.append(f"skipped non-template file '{entry.relative_path}'")
                continue

            staged.add(output)
            LOGGER.debug("staged path=%s kind=%s", output, entry.kind.value)

        return generated

    def _move_contents(self, source: Path, destination: Path) -> list[str]:
        moved: list[str] = []
        children = sorted(source.iterdir())
        for child in [c for c in children if c.is_dir()] + [c for c in children if not c.is_dir()]:
            shutil.move(str(child), str(destination / child.name))
            moved.append(child.name)
        return moved

    def _refresh_quietly(self) -> None:
        try:
            self.index.refresh()
        except OSError:
            LOGGER.exception("index refresh after cleanup failed")
