from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_MIRROR = "https://mirrors.kernel.org/archlinux"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def mirror(self) -> str:
        return str(self._section("mirror").get("url") or DEFAULT_MIRROR)

    @property
    def repo(self) -> str:
        return str(self._section("mirror").get("repo") or "core")

    @property
    def arch(self) -> str:
        return str(self._section("mirror").get("arch") or "x86_64")

    @property
    def seed_packages(self) -> List[str]:
        return list(self._section("packages").get("seed") or ["pacman"])

    @property
    def extra_packages(self) -> List[str]:
        return list(self._section("packages").get("extra") or [])

    @property
    def install_packages(self) -> List[str]:
        return list(self._section("packages").get("install") or ["base", "kexec-tools", "python"])

    @property
    def keyring(self) -> str:
        return str(self._section("packages").get("keyring") or "archlinux")

    @property
    def os_release_file(self) -> str:
        return str(self._section("preflight").get("os_release_file") or "/etc/debian_version")

    @property
    def os_version_prefix(self) -> str:
        return str(self._section("preflight").get("os_version_prefix") or "7.")

    @property
    def machine(self) -> str:
        return str(self._section("preflight").get("machine") or "x86_64")

    def with_extra_packages(self, names: List[str]) -> "InstallerConfig":
        if not names:
            return self
        raw = dict(self.raw)
        packages = dict(raw.get("packages") or {})
        packages["extra"] = [*self.extra_packages, *names]
        raw["packages"] = packages
        return InstallerConfig(raw=raw)


def load_config(path: Optional[str]) -> InstallerConfig:
    if path is None:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("installer config must contain a mapping/object")

    return InstallerConfig(raw=raw)
