from __future__ import annotations

from pathlib import Path

import pytest

from installergen.guid import resolve_guid
from installergen.io.adapters.local import LocalAssetIndex
from installergen.metadata import EMPTY_GUID, format_sidecar

SIDECAR_GUID = "11111111111111111111111111111111"
INDEX_GUID = "22222222222222222222222222222222"
PACKAGE = "com.example.tools_installer"
RELATIVE = "Core/Data/GitRepositoryTable.cs"


@pytest.fixture()
def indexed_project(project: Path) -> Path:
    target = project / "Packages" / PACKAGE / RELATIVE
    target.parent.mkdir(parents=True)
    target.write_text("class GitRepositoryTable {}", encoding="utf-8")
    target.with_name(target.name + ".meta").write_text(format_sidecar(INDEX_GUID), encoding="utf-8")
    return project


@pytest.fixture()
def target(tmp_path: Path) -> Path:
    path = tmp_path / "scratch" / RELATIVE
    path.parent.mkdir(parents=True)
    path.write_text("class GitRepositoryTable {}", encoding="utf-8")
    return path


def _write_sidecar(target: Path, text: str) -> None:
    target.with_name(target.name + ".meta").write_text(text, encoding="utf-8")


def test_sidecar_guid_is_preferred(indexed_project: Path, target: Path):
    _write_sidecar(target, format_sidecar(SIDECAR_GUID))
    assert resolve_guid(target, PACKAGE, RELATIVE, LocalAssetIndex(indexed_project)) == SIDECAR_GUID


def test_empty_sidecar_guid_falls_back_to_index(indexed_project: Path, target: Path):
    _write_sidecar(target, "fileFormatVersion: 2\nguid: 00000000000000000000000000000000\n")
    assert resolve_guid(target, PACKAGE, RELATIVE, LocalAssetIndex(indexed_project)) == INDEX_GUID


def test_missing_sidecar_falls_back_to_index(indexed_project: Path, target: Path):
    assert resolve_guid(target, PACKAGE, RELATIVE, LocalAssetIndex(indexed_project)) == INDEX_GUID


def test_corrupt_sidecar_falls_back_to_index(indexed_project: Path, target: Path):
    _write_sidecar(target, "garbage")
    assert resolve_guid(target, PACKAGE, RELATIVE, LocalAssetIndex(indexed_project)) == INDEX_GUID


def test_unknown_everywhere_returns_empty_guid(project: Path, target: Path):
    assert resolve_guid(target, PACKAGE, RELATIVE, LocalAssetIndex(project)) == EMPTY_GUID
