from __future__ import annotations

from datetime import date
from pathlib import Path

from vm_bootstrap.diagnostics import DiagnosticLog
from vm_bootstrap.models import LOADED, NOT_FOUND, Identity, TraceEntry
from vm_bootstrap.repository import ScriptRepository
from vm_bootstrap.resolver import CascadeResolver, build_candidates

DAY = date(2024, 5, 1)


def _write(root: Path, relative: str, content: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_full_identity_cascade_order() -> None:
    identity = Identity(app="web", hostname="web1", platform="ubuntu", platform_version="22.04")
    assert build_candidates(identity, DAY) == [
        "hostname/web1_2024-05-01.sh",
        "hostname/web1.sh",
        "app/web_2024-05-01.sh",
        "app/web.sh",
        "platform/ubuntu-22.04_2024-05-01.sh",
        "platform/ubuntu-22.04.sh",
        "platform/ubuntu_2024-05-01.sh",
        "platform/ubuntu.sh",
    ]


def test_version_without_platform_contributes_nothing() -> None:
    assert build_candidates(Identity(platform_version="22.04"), DAY) == []


def test_platform_without_version_skips_versioned_group() -> None:
    candidates = build_candidates(Identity(app="web", platform="debian"), DAY)
    assert candidates == [
        "app/web_2024-05-01.sh",
        "app/web.sh",
        "platform/debian_2024-05-01.sh",
        "platform/debian.sh",
    ]
    assert not any(path.startswith("platform/debian-") for path in candidates)


def test_empty_identity_has_no_candidates() -> None:
    assert build_candidates(Identity(), DAY) == []


def test_resolves_evergreen_platform_script(tmp_path: Path) -> None:
    _write(tmp_path, "platform/ubuntu.sh", "#!/bin/sh\necho ubuntu\n")
    diagnostics = DiagnosticLog()

    resolution = CascadeResolver(ScriptRepository(tmp_path)).resolve(Identity(platform="ubuntu"), DAY, diagnostics)

    assert resolution.content == b"#!/bin/sh\necho ubuntu\n"
    assert resolution.path == "platform/ubuntu.sh"
    assert resolution.trace == (
        TraceEntry("platform/ubuntu_2024-05-01.sh", NOT_FOUND),
        TraceEntry("platform/ubuntu.sh", LOADED),
    )
    assert diagnostics.lines == (
        "Cannot Load: platform/ubuntu_2024-05-01.sh",
        "    Loading: platform/ubuntu.sh",
    )


def test_first_match_short_circuits(tmp_path: Path) -> None:
    _write(tmp_path, "hostname/web1_2024-05-01.sh", "today only\n")
    _write(tmp_path, "hostname/web1.sh", "evergreen\n")
    _write(tmp_path, "app/web.sh", "app\n")

    resolution = CascadeResolver(ScriptRepository(tmp_path)).resolve(
        Identity(hostname="web1", app="web"), DAY, DiagnosticLog()
    )

    assert resolution.content == b"today only\n"
    assert [entry.outcome for entry in resolution.trace] == [LOADED]


def test_date_stamped_script_only_applies_on_its_day(tmp_path: Path) -> None:
    _write(tmp_path, "app/web_2024-05-01.sh", "today only\n")
    _write(tmp_path, "app/web.sh", "evergreen\n")
    resolver = CascadeResolver(ScriptRepository(tmp_path))

    assert resolver.resolve(Identity(app="web"), DAY, DiagnosticLog()).content == b"today only\n"
    assert resolver.resolve(Identity(app="web"), date(2024, 5, 2), DiagnosticLog()).content == b"evergreen\n"


def test_nothing_found_returns_full_trace(tmp_path: Path) -> None:
    resolution = CascadeResolver(ScriptRepository(tmp_path)).resolve(Identity(app="web"), DAY, DiagnosticLog())
    assert not resolution.found
    assert resolution.path is None
    assert [entry.outcome for entry in resolution.trace] == [NOT_FOUND, NOT_FOUND]


def test_directory_is_not_a_script(tmp_path: Path) -> None:
    (tmp_path / "app" / "web.sh").mkdir(parents=True)
    assert ScriptRepository(tmp_path).read("app/web.sh") is None


def test_paths_escaping_root_are_unreadable(tmp_path: Path) -> None:
    root = tmp_path / "scripts"
    root.mkdir()
    _write(tmp_path, "secret.sh", "nope\n")

    repository = ScriptRepository(root)
    assert repository.read("hostname/../../secret.sh") is None

    resolution = CascadeResolver(repository).resolve(Identity(hostname="../../secret"), DAY, DiagnosticLog())
    assert not resolution.found


def test_nul_byte_candidate_is_unreadable(tmp_path: Path) -> None:
    repository = ScriptRepository(tmp_path)
    assert repository.read("hostname/a\x00b.sh") is None

    resolution = CascadeResolver(repository).resolve(Identity(hostname="a\x00b"), DAY, DiagnosticLog())
    assert not resolution.found
    assert [entry.outcome for entry in resolution.trace] == [NOT_FOUND, NOT_FOUND]
