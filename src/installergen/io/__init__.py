"""Host environment interfaces for the installer generator."""

from .interfaces import IndexService, ReloadLock, reload_paused

__all__ = [
    "IndexService",
    "ReloadLock",
    "reload_paused",
]
