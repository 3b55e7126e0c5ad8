"""File session driver.

Persists each session payload as an individual file under a configurable
directory.  Defaults to ``tmp/sessions`` relative to the working directory.

Classes
-------
- FileDriver  — one-file-per-session storage
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from http_session_store.storage.base import DriverError, SessionDriver

logger = logging.getLogger(__name__)

_DEFAULT_LOCATION = Path("tmp") / "sessions"
_FILE_EXTENSION = ".sess"


class FileDriver(SessionDriver):
    """Stores sessions as ``<location>/<session_id>.sess`` files.

    Writes go to a temporary file that is then renamed over the target,
    so a concurrent reader sees either the old or the new payload.

    Parameters
    ----------
    location:
        Directory for session files.  Created on first write if absent.
    """

    def __init__(self, location: str | Path | None = None) -> None:
        self._location: Path = Path(location) if location is not None else _DEFAULT_LOCATION

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path_for(self, session_id: str) -> Path:
        # Guard against path traversal.
        safe_name = os.path.basename(session_id)
        return self._location / f"{safe_name}{_FILE_EXTENSION}"

    # ------------------------------------------------------------------
    # SessionDriver interface
    # ------------------------------------------------------------------

    def load(self, session_id: str) -> str | None:
        """Read and return the payload for ``session_id``, or None.

        Raises
        ------
        DriverError
            If the file exists but cannot be read.
        """
        path = self._path_for(session_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("FileDriver: cannot read %s: %s", path, exc)
            raise DriverError(session_id, f"cannot read {path}: {exc}") from exc

    def save(self, session_id: str, payload: str) -> None:
        """Write ``payload`` to the session file, replacing it atomically.

        Raises
        ------
        DriverError
            If the directory or file cannot be written.
        """
        path = self._path_for(session_id)
        try:
            self._location.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._location, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.warning("FileDriver: cannot write %s: %s", path, exc)
            raise DriverError(session_id, f"cannot write {path}: {exc}") from exc

    def delete(self, session_id: str) -> None:
        """Remove the file for ``session_id`` if it exists.

        Raises
        ------
        DriverError
            If the file exists but cannot be removed.
        """
        path = self._path_for(session_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise DriverError(session_id, f"cannot delete {path}: {exc}") from exc

    def exists(self, session_id: str) -> bool:
        """Return True if the file for ``session_id`` exists."""
        return self._path_for(session_id).is_file()

    def list(self) -> list[str]:
        """Return all session ids present in the storage directory.

        An empty list is returned if the directory does not yet exist.
        """
        if not self._location.exists():
            return []
        return [
            path.stem
            for path in self._location.glob(f"*{_FILE_EXTENSION}")
            if path.is_file()
        ]

    def __repr__(self) -> str:
        return f"FileDriver(location={str(self._location)!r})"
