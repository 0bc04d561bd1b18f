"""Abstract interfaces for the host environment the generator runs in."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional


class IndexService(ABC):
    """Asset index of the host project."""

    @abstractmethod
    def refresh(self) -> None:
        """Pick up files written since the last refresh so they become queryable."""

    @abstractmethod
    def find_by_path(self, path: str) -> Optional[str]:
        """Return the identifier of the asset at project relative ``path``, if any."""

    @abstractmethod
    def exists_package(self, name: str) -> bool:
        """Return ``True`` if a descriptor exists for the package called ``name``."""


class ReloadLock(ABC):
    """Switch suspending the host's reaction to changed files."""

    @abstractmethod
    def pause(self) -> None:
        """Suspend background reloads until :meth:`resume` is called."""

    @abstractmethod
    def resume(self) -> None:
        """Undo one previous :meth:`pause`."""

    @abstractmethod
    def request_reload(self) -> None:
        """Ask the host to reload dependent code once it is idle."""


@contextmanager
def reload_paused(lock: ReloadLock) -> Iterator[ReloadLock]:
    """Hold ``lock`` for the duration of the ``with`` block."""

    lock.pause()
    try:
        yield lock
    finally:
        lock.resume()


__all__ = ["IndexService", "ReloadLock", "reload_paused"]
