from __future__ import annotations

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)


class ScriptRepository:
    """Read-only view of the script tree (``hostname/``, ``app/``, ``platform/``)."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def locate(self, relative: str) -> Path | None:
        try:
            path = (self.root / relative).resolve()
        except (OSError, ValueError) as e:
            log.warning("cannot locate candidate %r: %s", relative, e)
            return None
        if path != self.root and self.root not in path.parents:
            log.warning("candidate %s escapes script root %s", relative, self.root)
            return None
        return path

    def read(self, relative: str) -> bytes | None:
        """Return the file contents, or None when missing or unreadable."""
        path = self.locate(relative)
        if path is None:
            return None
        try:
            if not path.is_file() or not os.access(path, os.R_OK):
                return None
            return path.read_bytes()
        except (OSError, ValueError) as e:
            log.debug("cannot read %s: %s", path, e)
            return None
