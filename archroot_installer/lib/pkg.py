from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol, Sequence

from .command import chroot_cmd

logger = logging.getLogger(__name__)

PACKAGE_CACHE_REL = "var/cache/pacman/pkg"
MIRRORLIST_REL = "etc/pacman.d/mirrorlist"


class PackageInstaller(Protocol):
    def refresh_ca_certificates(self, target_root: str) -> None:
        ...

    def init_keyring(self, target_root: str) -> None:
        ...

    def populate_keyring(self, target_root: str, keyring: str) -> None:
        ...

    def install(self, target_root: str, packages: Sequence[str]) -> None:
        ...


class PacmanInstaller:
    def refresh_ca_certificates(self, target_root: str) -> None:
        chroot_cmd(target_root, ["/usr/bin/update-ca-certificates", "--fresh"])

    def init_keyring(self, target_root: str) -> None:
        chroot_cmd(target_root, ["pacman-key", "--init"])

    def populate_keyring(self, target_root: str, keyring: str) -> None:
        chroot_cmd(target_root, ["pacman-key", "--populate", keyring])

    def install(self, target_root: str, packages: Sequence[str]) -> None:
        if not packages:
            return
        chroot_cmd(
            target_root,
            ["pacman", "-Sy", "--noconfirm", "--overwrite", "*", *packages],
        )


def link_package_cache(target_root: str, cache_dir_name: str) -> None:
    """Point the package manager's cache at the shared artifact cache."""

    cache = Path(target_root) / PACKAGE_CACHE_REL
    if cache.is_symlink():
        cache.unlink()
    elif cache.is_dir():
        cache.rmdir()
    cache.parent.mkdir(parents=True, exist_ok=True)
    os.symlink(f"../../../{cache_dir_name}", cache)


def mirrorlist_line(mirror: str) -> str:
    return f"Server = {mirror.rstrip('/')}/$repo/os/$arch"


def write_network_config(target_root: str, *, mirror: str, host_resolv_conf: str) -> None:
    """Restore config the package manager overwrites: resolver and mirrorlist."""

    root = Path(target_root)
    etc = root / "etc"
    etc.mkdir(parents=True, exist_ok=True)

    (etc / "resolv.conf.pacorig").unlink(missing_ok=True)
    resolv = etc / "resolv.conf"
    if resolv.is_symlink():
        resolv.unlink()
    shutil.copyfile(host_resolv_conf, resolv)

    mirrorlist = root / MIRRORLIST_REL
    mirrorlist.parent.mkdir(parents=True, exist_ok=True)
    Path(f"{mirrorlist}.pacorig").unlink(missing_ok=True)
    line = mirrorlist_line(mirror)
    existing = mirrorlist.read_text(encoding="utf-8") if mirrorlist.exists() else ""
    if line not in existing.splitlines():
        with open(mirrorlist, "a", encoding="utf-8") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(line + "\n")
    logger.info("Configured mirror %s", mirror)
