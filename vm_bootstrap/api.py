from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from . import __version__
from .composer import ScriptComposer
from .models import Identity
from .repository import ScriptRepository
from .resolver import CascadeResolver, build_candidates
from .settings import BootstrapSettings

log = logging.getLogger(__name__)

SCRIPT_MEDIA_TYPE = "text/plain;charset=utf-8"
RESOLUTION_HEADER = "X-Bootstrap-Resolution"


async def _request_params(request: Request) -> dict[str, str]:
    params = dict(request.query_params)
    try:
        form = await request.form()
    except (HTTPException, MultiPartException) as e:
        log.warning("unreadable form body (%s); using query parameters only", getattr(e, "detail", e))
        return params
    for key, value in form.items():
        if isinstance(value, str):
            params[key] = value
    return params


def make_app(settings: BootstrapSettings, today: Callable[[], date] = date.today) -> FastAPI:
    repository = ScriptRepository(settings.scripts_root)
    composer = ScriptComposer(CascadeResolver(repository))

    app = FastAPI(title="VM Bootstrap", version=__version__)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.api_route("/", methods=["GET", "POST"])
    async def bootstrap(request: Request):
        params = await _request_params(request)
        composition = await run_in_threadpool(composer.compose, params, today())
        log.info(
            "bootstrap %s for %s%s",
            composition.kind,
            request.client.host if request.client else "-",
            f" ({composition.resolution.path})" if composition.resolution and composition.resolution.path else "",
        )
        return Response(
            content=composition.body,
            status_code=200,
            media_type=SCRIPT_MEDIA_TYPE,
            headers={RESOLUTION_HEADER: composition.kind},
        )

    @app.get("/v1/candidates")
    def candidates(request: Request):
        identity = Identity.from_params(request.query_params)
        day = today()
        return {
            "date": day.isoformat(),
            "identity": identity.as_params(),
            "candidates": build_candidates(identity, day),
        }

    return app
