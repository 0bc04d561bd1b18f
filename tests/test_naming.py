from __future__ import annotations

import pytest

from installergen.errors import NamespaceDerivationError
from installergen.naming import derive_namespace


@pytest.mark.parametrize(
    "value, expected",
    [
        ("com.author.package_name", "AuthorPackageName"),
        ("com.author.package_name_installer", "AuthorPackageNameInstaller"),
        ("com.my-company.tool", "MyCompanyTool"),
        ("com.abc.v2tools", "AbcV2Tools"),
        ("com.a1b.x", "A1BX"),
        ("com.author.a", "AuthorA"),
    ],
)
def test_derive_namespace(value, expected):
    assert derive_namespace(value) == expected


def test_derive_namespace_keeps_digits_as_boundaries():
    assert derive_namespace("com.team.123abc") == "Team123Abc"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_derive_namespace_requires_name(value):
    with pytest.raises(NamespaceDerivationError):
        derive_namespace(value)
