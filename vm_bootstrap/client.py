from __future__ import annotations

import logging

import requests

log = logging.getLogger(__name__)


class BootstrapClient:
    def __init__(self, base_url: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def fetch_script(self, **identity: str | None) -> str:
        data = {k: v for k, v in identity.items() if v}
        r = requests.post(self._url("/"), data=data, timeout=self.timeout)
        if r.status_code >= 400:
            raise RuntimeError(f"fetch failed: {r.status_code} {r.text}")
        log.debug("resolution=%s", r.headers.get("X-Bootstrap-Resolution"))
        return r.text

    def candidates(self, **identity: str | None) -> dict:
        params = {k: v for k, v in identity.items() if v}
        r = requests.get(self._url("/v1/candidates"), params=params, timeout=self.timeout)
        if r.status_code >= 400:
            raise RuntimeError(f"candidates failed: {r.status_code} {r.text}")
        return r.json()
