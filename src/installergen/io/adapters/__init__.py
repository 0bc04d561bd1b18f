"""Concrete host environment adapters."""

from .local import LocalAssetIndex, LocalReloadLock

__all__ = ["LocalAssetIndex", "LocalReloadLock"]
