from __future__ import annotations

import logging

from ..lib.chroot import mount_virtual_filesystems
from ..lib.pkg import link_package_cache, write_network_config
from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class InstallBaseSystemStep:
    step_id = "60_install_base"

    def run(self, ctx: BootstrapCtx) -> None:
        root = ctx.staging_root
        installer = ctx.tools.installer

        # Released by the caller, on success or failure.
        mount_virtual_filesystems(ctx.mounts, root)

        logger.info("Doing initial configuration ...")
        link_package_cache(root, ctx.paths.packages_dir_name)
        installer.refresh_ca_certificates(root)
        self._network_config(ctx)

        logger.info("Initial bootstrap ...")
        installer.init_keyring(root)
        installer.populate_keyring(root, ctx.cfg.keyring)
        installer.install(root, ctx.cfg.install_packages)

        # the install replaces resolv.conf and the mirrorlist
        self._network_config(ctx)

    def _network_config(self, ctx: BootstrapCtx) -> None:
        write_network_config(
            ctx.staging_root,
            mirror=ctx.cfg.mirror,
            host_resolv_conf=ctx.paths.host_resolv_conf,
        )
