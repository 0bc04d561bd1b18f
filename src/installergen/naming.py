"""Conversion of package names into code identifiers."""

from __future__ import annotations

from .errors import NamespaceDerivationError

__all__ = ["derive_namespace"]


_DOMAIN_ROOT = "com."


def derive_namespace(package_name: str | None) -> str:
    """Return the code namespace used for ``package_name``.

    The reverse-domain root is dropped and every remaining segment is
    capitalised and concatenated, so ``"com.author.package_name"`` becomes
    ``"AuthorPackageName"``. Any character other than a lowercase letter starts
    a new segment; decimal digits are kept, everything else is removed.

    Raises
    ------
    NamespaceDerivationError
        If ``package_name`` is missing or blank.
    """

    if package_name is None or not package_name.strip():
        raise NamespaceDerivationError("a package name is required to derive a namespace")

    text = package_name
    if text.startswith(_DOMAIN_ROOT):
        text = text[len(_DOMAIN_ROOT) :]

    at_segment_start = True
    characters: list[str] = []
    for char in text:
        if char.islower():
            characters.append(char.upper() if at_segment_start else char)
            at_segment_start = False
            continue

        at_segment_start = True
        if char.isdecimal():
            characters.append(char)

    return "".join(characters)
