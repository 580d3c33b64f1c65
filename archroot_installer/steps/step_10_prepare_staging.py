from __future__ import annotations

import logging
import shutil

from ..lib.fsops import clean_staging
from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class PrepareStagingStep:
    step_id = "10_prepare_staging"

    def run(self, ctx: BootstrapCtx) -> None:
        paths = ctx.paths
        # The index is always fetched fresh; the package cache survives.
        if paths.installer_dir.exists():
            shutil.rmtree(paths.installer_dir)
        paths.installer_dir.mkdir(parents=True, exist_ok=True)

        clean_staging(
            paths.installer_dir.parent,
            keep=[paths.installer_dir_name, paths.packages_dir_name],
            confirm=ctx.confirm,
        )
