"""Temporary on-disk artifacts for memory-constrained HTML processing.

A fetch that decides to spill its response body to disk does so through
:meth:`ArtifactRegistry.spill`, which hands back a uniquely named file and
removes it when the ``async with`` block ends. Files that cannot be removed at that
point stay registered and are swept when the process shuts down.
"""

from __future__ import annotations

import asyncio
import atexit
import signal
import tempfile
import threading
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Set

from loguru import logger

DEFAULT_PREFIX = "webscout-fetch-"


class ArtifactRegistry:
    """Tracks outstanding temporary files and removes them on teardown."""

    def __init__(
        self,
        directory: Optional[str | Path] = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self.directory = Path(directory) if directory else Path(tempfile.gettempdir())
        self.prefix = prefix
        self._outstanding: Set[Path] = set()
        self._installed = False
        self._signals_installed = False

    @property
    def outstanding(self) -> Set[Path]:
        return set(self._outstanding)

    def new_path(self) -> Path:
        return self.directory / f"{self.prefix}{uuid.uuid4().hex}.html"

    @asynccontextmanager
    async def spill(self, content: str) -> AsyncIterator[Path]:
        """Write ``content`` to a fresh artifact and release it afterwards.

        The write runs in a worker thread.
        """
        path = self.new_path()
        self._outstanding.add(path)
        try:
            await asyncio.to_thread(path.write_text, content, encoding="utf-8")
            yield path
        finally:
            self.release(path)

    def release(self, path: Path) -> bool:
        """Delete ``path``; on failure keep it registered for the final sweep."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(f"Could not remove temporary file {path}, deferring to exit: {exc}")
            return False
        self._outstanding.discard(path)
        return True

    def sweep(self) -> None:
        """Best-effort removal of every artifact still registered."""
        for path in list(self._outstanding):
            try:
                path.unlink(missing_ok=True)
            except OSError:
                continue
            self._outstanding.discard(path)

    def install(self, handle_signals: bool = True) -> None:
        """Register the sweep for interpreter exit and, optionally, SIGTERM.

        Embedding applications that own their signal handling should pass
        ``handle_signals=False``. SIGINT keeps Python's default
        ``KeyboardInterrupt`` path, which ends in the ``atexit`` sweep.
        """
        if not self._installed:
            atexit.register(self.sweep)
            self._installed = True
        if (
            handle_signals
            and not self._signals_installed
            and threading.current_thread() is threading.main_thread()
        ):
            signal.signal(signal.SIGTERM, self._handle_signal)
            self._signals_installed = True

    def _handle_signal(self, signum, frame) -> None:
        self.sweep()
        raise SystemExit(128 + signum)


__all__ = ["ArtifactRegistry", "DEFAULT_PREFIX"]
