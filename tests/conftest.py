from __future__ import annotations

from pathlib import Path

import pytest

from archroot_installer.lib.env import Paths


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    root = tmp_path / "core"
    root.mkdir()
    return root


@pytest.fixture
def tmp_paths(tmp_path: Path) -> Paths:
    staging = tmp_path / "archroot"
    resolv = tmp_path / "etc" / "resolv.conf"
    resolv.parent.mkdir(parents=True)
    resolv.write_text("nameserver 192.0.2.1\n", encoding="utf-8")
    return Paths(
        staging_root=str(staging),
        init_path=str(tmp_path / "sbin" / "init"),
        saved_init_path=str(tmp_path / "sbin" / "init.original"),
        live_root=str(tmp_path),
        host_resolv_conf=str(resolv),
        log_default=str(tmp_path / "installer.log"),
    )
