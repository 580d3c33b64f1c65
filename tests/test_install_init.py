from pathlib import Path

import pytest

from archroot_installer.config import InstallerConfig
from archroot_installer.lib.chroot import MountStack
from archroot_installer.lib.env import Paths
from archroot_installer.pipeline import BootstrapCtx
from archroot_installer.steps import InstallSelfAsInitStep
from archroot_installer.steps import step_70_install_init

from .fakes import FakeMounter, fake_toolkit


def _ctx(paths: Paths, self_path: Path) -> BootstrapCtx:
    return BootstrapCtx(
        cfg=InstallerConfig(),
        paths=paths,
        tools=fake_toolkit(),
        self_path=str(self_path),
        mounts=MountStack(FakeMounter()),
    )


@pytest.fixture
def real_init(tmp_paths: Paths) -> Path:
    init = Path(tmp_paths.init_path)
    init.parent.mkdir(parents=True)
    init.write_text("real init")
    return init


def _sbin_entries(init: Path) -> list:
    return sorted(p.name for p in init.parent.iterdir())


def test_installs_self_and_saves_original(tmp_paths: Paths, real_init: Path, tmp_path: Path) -> None:
    script = tmp_path / "archroot-installer.pyz"
    script.write_text("installer script")

    InstallSelfAsInitStep().run(_ctx(tmp_paths, script))

    assert real_init.read_text() == "installer script"
    assert real_init.stat().st_mode & 0o777 == 0o755
    assert Path(tmp_paths.saved_init_path).read_text() == "real init"
    assert _sbin_entries(real_init) == ["init", "init.original"]


def test_failed_copy_leaves_init_alone(tmp_paths: Paths, real_init: Path, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        InstallSelfAsInitStep().run(_ctx(tmp_paths, tmp_path / "missing.pyz"))

    assert real_init.read_text() == "real init"
    assert _sbin_entries(real_init) == ["init"]


def test_failed_replace_restores_original(tmp_paths: Paths, real_init: Path, tmp_path: Path, monkeypatch) -> None:
    script = tmp_path / "archroot-installer.pyz"
    script.write_text("installer script")

    def refuse(src, dst):
        raise OSError(30, "Read-only file system", dst)

    monkeypatch.setattr(step_70_install_init.os, "replace", refuse)

    with pytest.raises(OSError):
        InstallSelfAsInitStep().run(_ctx(tmp_paths, script))

    assert real_init.read_text() == "real init"
    assert _sbin_entries(real_init) == ["init"]
