from __future__ import annotations

from pathlib import Path

import pytest

from installergen.config import InstallerParameters
from installergen.errors import DuplicatePackageError, ParameterValidationError
from installergen.io.adapters.local import LocalAssetIndex
from installergen.validation import (
    check_package_absent,
    ensure_generatable,
    validate_package_name,
    validate_parameters,
    validate_version,
)


@pytest.mark.parametrize(
    "name",
    [
        "com.a",
        "com.a.b",
        "com.author.package_name",
        "com.author.package-name.extra_1",
        "com.0.9",
        "com." + "a" * 210,
    ],
)
def test_valid_package_names(name):
    check = validate_package_name(name)
    assert check.valid
    assert not check.too_long


@pytest.mark.parametrize(
    "name",
    [
        None,
        "",
        "   ",
        "com",
        "com.",
        "org.author.name",
        "com.Author.name",
        "com.author..name",
        "com.-author.name",
        "com._author",
        "com.author.name.",
        "com.author.na me",
        "com.author.name\n",
        " com.author.name",
        "com.author.名前",
    ],
)
def test_invalid_package_names(name):
    check = validate_package_name(name)
    assert not check.valid
    assert not check.warn_length


def test_package_name_length_limit():
    at_limit = "com." + "a" * 210
    assert len(at_limit) == 214
    assert validate_package_name(at_limit).valid

    over_limit = "com." + "a" * 211
    check = validate_package_name(over_limit)
    assert not check.valid
    assert check.too_long
    assert not check.warn_length


def test_length_warning_only_above_fifty_characters():
    fifty = "com." + "a" * 46
    assert len(fifty) == 50
    assert not validate_package_name(fifty).warn_length

    fifty_one = "com." + "a" * 47
    check = validate_package_name(fifty_one)
    assert check.valid
    assert check.warn_length


@pytest.mark.parametrize("version", ["0.0.0", "1.2.3", "10.0.1", "999999.999999.999999", "100000.0.5"])
def test_valid_versions(version):
    assert validate_version(version)


@pytest.mark.parametrize(
    "version",
    [
        None,
        "",
        "1",
        "1.2",
        "1.2.3.4",
        "01.0.0",
        "1.00.0",
        "1.0.01",
        "1000000.0.0",
        "1.2.3-beta",
        "v1.2.3",
        "1.2.3\n",
        "１.２.３",
    ],
)
def test_invalid_versions(version):
    assert not validate_version(version)


def test_validate_parameters_combines_checks():
    report = validate_parameters(InstallerParameters(package_name="com.author.name", version="1.0.0"))
    assert report.valid
    assert not report.invalid_name
    assert not report.invalid_version
    assert report.messages() == []

    report = validate_parameters(InstallerParameters(package_name="bad", version="01.0.0"))
    assert not report.valid
    assert report.invalid_name
    assert report.invalid_version
    assert len(report.messages()) == 2


def test_length_warning_does_not_invalidate():
    report = validate_parameters(InstallerParameters(package_name="com." + "a" * 60, version="1.0.0"))
    assert report.valid
    assert report.warn_length
    assert "longer than 50" in report.messages()[0]


def test_check_package_absent(project: Path):
    index = LocalAssetIndex(project)
    assert check_package_absent("com.example.new", index)
    assert not check_package_absent("", index)
    assert not check_package_absent("  ", index)

    existing = project / "Packages" / "com.example.taken"
    existing.mkdir()
    (existing / "package.json").write_text('{"name": "com.example.taken"}', encoding="utf-8")
    assert not check_package_absent("com.example.taken", index)


def test_ensure_generatable_raises_for_invalid_parameters(project: Path):
    with pytest.raises(ParameterValidationError) as excinfo:
        ensure_generatable(InstallerParameters(package_name="nope", version="1.0.0"), LocalAssetIndex(project))
    assert excinfo.value.report.invalid_name
    assert not excinfo.value.report.invalid_version


def test_ensure_generatable_raises_for_duplicates(project: Path, parameters: InstallerParameters):
    existing = project / "Packages" / parameters.package_name
    existing.mkdir()
    (existing / "package.json").write_text("{}", encoding="utf-8")

    with pytest.raises(DuplicatePackageError):
        ensure_generatable(parameters, LocalAssetIndex(project))


def test_ensure_generatable_returns_report(project: Path, parameters: InstallerParameters):
    report = ensure_generatable(parameters, LocalAssetIndex(project))
    assert report.valid
