from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class InstallSelfAsInitStep:
    """Swap this script in as init so the next boot runs it as process 1.

    The new init is fully written before the original is moved aside, and
    the original is put back if the final replace fails, so the host always
    has an init.
    """

    step_id = "70_install_init"

    def run(self, ctx: BootstrapCtx) -> None:
        paths = ctx.paths
        staged = Path(f"{paths.init_path}.archroot-new")

        try:
            shutil.copyfile(ctx.self_path, staged)
            os.chmod(staged, 0o755)
        except OSError:
            staged.unlink(missing_ok=True)
            raise

        os.rename(paths.init_path, paths.saved_init_path)
        try:
            os.replace(staged, paths.init_path)
        except OSError:
            os.rename(paths.saved_init_path, paths.init_path)
            staged.unlink(missing_ok=True)
            raise

        logger.info("Installed %s as %s (original saved at %s)", ctx.self_path, paths.init_path, paths.saved_init_path)
