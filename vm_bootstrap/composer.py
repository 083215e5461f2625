from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping

from .diagnostics import DiagnosticLog, embed_trailer
from .models import Identity, Resolution
from .resolver import CascadeResolver
from .scripts import PRELOADER_SCRIPT, USAGE_ERROR_SCRIPT

log = logging.getLogger(__name__)

PRELOADER = "preloader"
RESOLVED = "resolved"
USAGE_ERROR = "usage_error"


@dataclass(frozen=True)
class Composition:
    kind: str
    identity: Identity
    body: bytes
    resolution: Resolution | None = None


class ScriptComposer:
    """Pick the script to hand back for one request and embed its diagnostic trailer.

    * no identity at all -> preloader, the repository is never consulted
    * a non-blank script was resolved -> that script
    * anything else -> usage error script
    """

    def __init__(self, resolver: CascadeResolver) -> None:
        self.resolver = resolver

    def compose(self, params: Mapping[str, object], day: date) -> Composition:
        diagnostics = DiagnosticLog()
        identity = Identity.from_params(params, diagnostics)

        if identity.is_empty:
            body = embed_trailer(PRELOADER_SCRIPT.encode("utf-8"), diagnostics)
            return Composition(PRELOADER, identity, body)

        resolution = self.resolver.resolve(identity, day, diagnostics)
        if resolution.content is None or not resolution.content.strip():
            if resolution.found:
                log.info("resolved script %s is empty; using usage error script", resolution.path)
            else:
                log.info("no script matched %s", identity.as_params())
            body = embed_trailer(USAGE_ERROR_SCRIPT.encode("utf-8"), diagnostics)
            return Composition(USAGE_ERROR, identity, body, resolution)

        body = embed_trailer(resolution.content, diagnostics, source=resolution.path)
        return Composition(RESOLVED, identity, body, resolution)
