from pathlib import Path

import pytest

from archroot_installer.config import DEFAULT_MIRROR, InstallerConfig, load_config


def test_defaults_without_file() -> None:
    cfg = load_config(None)
    assert cfg.mirror == DEFAULT_MIRROR
    assert cfg.repo == "core"
    assert cfg.arch == "x86_64"
    assert cfg.seed_packages == ["pacman"]
    assert cfg.extra_packages == []
    assert cfg.install_packages == ["base", "kexec-tools", "python"]
    assert cfg.os_version_prefix == "7."


def test_yaml_overrides(tmp_path: Path) -> None:
    p = tmp_path / "installer.yaml"
    p.write_text(
        "mirror:\n  url: https://mirror.example/arch\npackages:\n  extra: [openssh]\npreflight:\n  os_version_prefix: '12.'\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.mirror == "https://mirror.example/arch"
    assert cfg.extra_packages == ["openssh"]
    assert cfg.os_version_prefix == "12."
    assert cfg.machine == "x86_64"


def test_with_extra_packages_appends() -> None:
    cfg = InstallerConfig(raw={"packages": {"extra": ["vim"]}}).with_extra_packages(["htop"])
    assert cfg.extra_packages == ["vim", "htop"]


def test_rejects_bad_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    toml = tmp_path / "installer.toml"
    toml.write_text("x = 1\n")
    with pytest.raises(ValueError):
        load_config(str(toml))

    listy = tmp_path / "list.yaml"
    listy.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(str(listy))
