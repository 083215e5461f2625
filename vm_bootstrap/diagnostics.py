"""Per-request diagnostic log rendered as a commented shell trailer."""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)

INIT_LOG_MARKER = "#{BOOTSTRAP_INIT_LOG}"


def _defuse_marker(line: str) -> str:
    # request values end up in the trailer; they must never reintroduce the marker
    return line.replace("#{", "#\\{")


class DiagnosticLog:
    def __init__(self) -> None:
        self._lines: list[str] = []

    def add(self, line: str) -> None:
        self._lines.extend(line.splitlines() or [""])

    def blank(self) -> None:
        self._lines.append("")

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def render(self) -> str:
        """Render every line as a shell comment; blank lines become a bare ``#``."""
        return "\n".join("#" if not line.strip() else f"# {_defuse_marker(line)}" for line in self._lines)


def embed_trailer(script: bytes, diagnostics: DiagnosticLog, *, source: str | None = None) -> bytes:
    marker = INIT_LOG_MARKER.encode("utf-8")
    if marker not in script:
        log.warning("script %s has no %s marker; diagnostic trailer dropped", source or "<inline>", INIT_LOG_MARKER)
        return script
    return script.replace(marker, diagnostics.render().encode("utf-8"), 1)
