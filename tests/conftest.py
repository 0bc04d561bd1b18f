from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from installergen.config import GeneratorSettings, InstallerParameters  # noqa: E402
from installergen.io.adapters.local import LocalAssetIndex, LocalReloadLock  # noqa: E402


README_TEMPLATE = (
    "# \\!<PkgDisplayName>\n"
    "name: \\!<PkgName>\n"
    "version: \\!<PkgVer>\n"
    "author: \\!<PkgAuthor>\n"
    "namespace: \\!<NameSpace>\n"
)

TABLE_TEMPLATE = "namespace \\!<NameSpace>.Core.Data\n{\n    public class GitRepositoryTable {}\n}\n"

INSTALLER_TEMPLATE = "namespace \\!<NameSpace>\n{\n    // table: \\!<RepoTblSrcGuid>\n}\n"


@pytest.fixture()
def parameters() -> InstallerParameters:
    return InstallerParameters(
        package_name="com.example.tools_installer",
        version="1.2.3",
        display_name="Tools Installer",
        author_name="Example Author",
    )


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "Assets").mkdir(parents=True)
    (root / "Packages").mkdir()
    return root


@pytest.fixture()
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "templates"
    (root / "Core" / "Data").mkdir(parents=True)
    (root / "Editor").mkdir()
    (root / "README.md.txt").write_text(README_TEMPLATE, encoding="utf-8")
    (root / "Core" / "Data" / "GitRepositoryTable.cs.txt").write_text(TABLE_TEMPLATE, encoding="utf-8")
    (root / "Editor" / "Installer.cs.txt").write_text(INSTALLER_TEMPLATE, encoding="utf-8")
    return root


@pytest.fixture()
def destination(project: Path) -> Path:
    path = project / "Packages" / "com.example.tools_installer"
    path.mkdir()
    return path


@pytest.fixture()
def index(project: Path) -> LocalAssetIndex:
    return LocalAssetIndex(project)


@pytest.fixture()
def lock() -> LocalReloadLock:
    return LocalReloadLock()


@pytest.fixture()
def settings(project: Path, template_root: Path) -> GeneratorSettings:
    return GeneratorSettings(project_root=project, template_root=template_root)
