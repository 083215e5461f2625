from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import DiagnosticLog

log = logging.getLogger(__name__)

LOADED = "loaded"
NOT_FOUND = "not_found"

IDENTITY_FIELDS: tuple[tuple[str, str], ...] = (
    ("app", "App"),
    ("hostname", "Hostname"),
    ("platform", "Platform"),
    ("platform_version", "Platform Version"),
)

PATH_SEPARATORS = ("/", "\\")


def _normalize(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if any(sep in text for sep in PATH_SEPARATORS):
        log.warning("ignoring identity value with a path separator: %r", text)
        return None
    return text or None


@dataclass(frozen=True)
class Identity:
    app: str | None = None
    hostname: str | None = None
    platform: str | None = None
    platform_version: str | None = None

    def __post_init__(self) -> None:
        for name, _ in IDENTITY_FIELDS:
            object.__setattr__(self, name, _normalize(getattr(self, name)))

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name, _ in IDENTITY_FIELDS)

    @classmethod
    def from_params(cls, params: Mapping[str, object], log: "DiagnosticLog | None" = None) -> "Identity":
        """Build an identity from request parameters, recording each assignment in ``log``.

        Unknown keys are ignored; missing or empty values are left unset.
        """
        identity = cls(**{name: params.get(name) for name, _ in IDENTITY_FIELDS})
        if log is not None:
            for name, label in IDENTITY_FIELDS:
                log.add(f"{label:>16}: {getattr(identity, name) or '-'}")
            log.blank()
        return identity

    def as_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for name, _ in IDENTITY_FIELDS:
            value = getattr(self, name)
            if value is not None:
                params[name] = value
        return params


@dataclass(frozen=True)
class TraceEntry:
    path: str
    outcome: str


@dataclass(frozen=True)
class Resolution:
    content: bytes | None = None
    path: str | None = None
    trace: tuple[TraceEntry, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return self.content is not None
