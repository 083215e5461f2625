from __future__ import annotations

from vm_bootstrap.diagnostics import DiagnosticLog
from vm_bootstrap.models import Identity


def test_empty_strings_are_unset() -> None:
    identity = Identity.from_params({"app": "", "hostname": "  ", "platform": "ubuntu"})
    assert identity.app is None
    assert identity.hostname is None
    assert identity.platform == "ubuntu"
    assert identity.platform_version is None
    assert not identity.is_empty


def test_unknown_keys_are_ignored() -> None:
    identity = Identity.from_params({"role": "web", "region": "ewr"})
    assert identity == Identity()
    assert identity.is_empty


def test_assignments_are_logged_in_fixed_order() -> None:
    diagnostics = DiagnosticLog()
    Identity.from_params({"platform_version": "22.04", "app": "web"}, diagnostics)
    assert diagnostics.lines == (
        "             App: web",
        "        Hostname: -",
        "        Platform: -",
        "Platform Version: 22.04",
        "",
    )


def test_as_params_skips_unset() -> None:
    identity = Identity(hostname="db1", platform="debian")
    assert identity.as_params() == {"hostname": "db1", "platform": "debian"}


def test_values_with_path_separators_are_unset() -> None:
    identity = Identity.from_params({"hostname": "../app/secret", "app": "web\\db", "platform": "ubuntu"})
    assert identity.hostname is None
    assert identity.app is None
    assert identity.platform == "ubuntu"
