from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    staging_root: str = "/archroot"
    init_path: str = "/sbin/init"
    saved_init_path: str = "/sbin/init.original"
    # Paths as seen from inside the staging root after change-root.
    self_copy_path: str = "/installer/script.pyz"
    old_root_mount: str = "/realroot"
    holding_name: str = "oldroot"
    installer_dir_name: str = "installer"
    packages_dir_name: str = "packages"
    shell: str = "/bin/bash"
    live_root: str = "/"
    host_resolv_conf: str = "/etc/resolv.conf"
    log_default: str = "/var/log/archroot-installer.log"

    def in_staging(self, path: str) -> Path:
        """Host-side location of a path inside the staging root."""
        return Path(self.staging_root) / path.lstrip("/")

    @property
    def installer_dir(self) -> Path:
        return Path(self.staging_root) / self.installer_dir_name

    @property
    def packages_dir(self) -> Path:
        return Path(self.staging_root) / self.packages_dir_name


PATHS = Paths()
