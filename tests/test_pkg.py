import os
from pathlib import Path

from archroot_installer.lib.pkg import link_package_cache, mirrorlist_line, write_network_config


def test_link_package_cache_replaces_directory(tmp_path: Path) -> None:
    cache = tmp_path / "var" / "cache" / "pacman" / "pkg"
    cache.mkdir(parents=True)

    link_package_cache(str(tmp_path), "packages")

    assert os.readlink(cache) == "../../../packages"


def test_network_config_is_idempotent(tmp_path: Path) -> None:
    root = tmp_path / "archroot"
    host_resolv = tmp_path / "resolv.conf"
    host_resolv.write_text("nameserver 192.0.2.53\n")
    (root / "etc" / "pacman.d").mkdir(parents=True)
    (root / "etc" / "resolv.conf.pacorig").write_text("old")
    (root / "etc" / "pacman.d" / "mirrorlist").write_text("#Server = https://example.org/$repo/os/$arch")

    for _ in range(2):
        write_network_config(str(root), mirror="https://mirror.example/arch/", host_resolv_conf=str(host_resolv))

    assert (root / "etc" / "resolv.conf").read_text() == "nameserver 192.0.2.53\n"
    assert not (root / "etc" / "resolv.conf.pacorig").exists()
    lines = (root / "etc" / "pacman.d" / "mirrorlist").read_text().splitlines()
    assert lines.count(mirrorlist_line("https://mirror.example/arch")) == 1
    assert lines[-1] == "Server = https://mirror.example/arch/$repo/os/$arch"
