from __future__ import annotations

import logging

from ..lib.preflight import run_preflight
from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class PreflightStep:
    step_id = "00_preflight"

    def run(self, ctx: BootstrapCtx) -> None:
        run_preflight(
            os_release_file=ctx.cfg.os_release_file,
            os_version_prefix=ctx.cfg.os_version_prefix,
            machine=ctx.cfg.machine,
            saved_init_path=ctx.paths.saved_init_path,
        )
