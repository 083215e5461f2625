from __future__ import annotations

import logging
from datetime import date

from .diagnostics import DiagnosticLog
from .models import LOADED, NOT_FOUND, Identity, Resolution, TraceEntry
from .repository import ScriptRepository

log = logging.getLogger(__name__)


def build_candidates(identity: Identity, day: date) -> list[str]:
    """Candidate paths, most specific first.

    Hostname beats app, app beats platform, and a version-qualified platform
    beats the bare platform. Within each group the date-stamped file is tried
    before the evergreen one.
    """
    stamp = day.isoformat()
    candidates: list[str] = []

    if identity.hostname:
        candidates.append(f"hostname/{identity.hostname}_{stamp}.sh")
        candidates.append(f"hostname/{identity.hostname}.sh")

    if identity.app:
        candidates.append(f"app/{identity.app}_{stamp}.sh")
        candidates.append(f"app/{identity.app}.sh")

    if identity.platform and identity.platform_version:
        candidates.append(f"platform/{identity.platform}-{identity.platform_version}_{stamp}.sh")
        candidates.append(f"platform/{identity.platform}-{identity.platform_version}.sh")

    if identity.platform:
        candidates.append(f"platform/{identity.platform}_{stamp}.sh")
        candidates.append(f"platform/{identity.platform}.sh")

    return candidates


class CascadeResolver:
    def __init__(self, repository: ScriptRepository) -> None:
        self.repository = repository

    def resolve(self, identity: Identity, day: date, diagnostics: DiagnosticLog) -> Resolution:
        trace: list[TraceEntry] = []
        for path in build_candidates(identity, day):
            content = self.repository.read(path)
            if content is None:
                trace.append(TraceEntry(path, NOT_FOUND))
                diagnostics.add(f"Cannot Load: {path}")
                continue
            trace.append(TraceEntry(path, LOADED))
            diagnostics.add(f"    Loading: {path}")
            log.debug("resolved %s after %d candidate(s)", path, len(trace))
            return Resolution(content=content, path=path, trace=tuple(trace))
        return Resolution(trace=tuple(trace))
