from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable


def write_package(
    root: Path,
    name: str,
    version: str = "1.0-1",
    *,
    depends: Iterable[str] = (),
    provides: Iterable[str] = (),
    filename: str | None = None,
    sha256: str = "",
    split_depends: bool = True,
) -> Path:
    """Create one package directory in an unpacked repository database."""

    d = root / f"{name}-{version}"
    d.mkdir(parents=True)
    desc = [
        "%FILENAME%",
        filename or f"{name}-{version}-x86_64.pkg.tar.xz",
        "",
        "%NAME%",
        name,
        "",
        "%VERSION%",
        version,
        "",
        "%SHA256SUM%",
        sha256,
        "",
    ]
    deps: list[str] = []
    if depends:
        deps += ["%DEPENDS%", *depends, ""]
    if provides:
        deps += ["%PROVIDES%", *provides, ""]

    if split_depends:
        (d / "desc").write_text("\n".join(desc) + "\n", encoding="utf-8")
        (d / "depends").write_text("\n".join(deps) + "\n", encoding="utf-8")
    else:
        (d / "desc").write_text("\n".join(desc + deps) + "\n", encoding="utf-8")
    return d


def build_live_tree(tmp_path: Path) -> Path:
    live = tmp_path / "realroot"
    (live / "etc").mkdir(parents=True)
    (live / "etc" / "hostname").write_text("oldhost\n")
    (live / "home" / "alice").mkdir(parents=True)
    (live / "home" / "alice" / "notes.txt").write_text("keep me\n")
    (live / "vmlinuz").write_text("old kernel")

    staging = live / "archroot"
    (staging / "usr" / "bin").mkdir(parents=True)
    (staging / "usr" / "bin" / "pacman").write_text("#!pacman\n")
    (staging / "etc").mkdir()
    (staging / "etc" / "os-release").write_text("NAME=Arch Linux\n")
    os.symlink("usr/bin", staging / "bin")
    (staging / "installer").mkdir()
    (staging / "installer" / "script.pyz").write_text("zip")
    (staging / "realroot").mkdir()
    return live
