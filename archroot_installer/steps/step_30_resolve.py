from __future__ import annotations

import logging

from ..lib.resolver import closure_records, resolve_closure
from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class ResolveDependenciesStep:
    step_id = "30_resolve"

    def run(self, ctx: BootstrapCtx) -> None:
        index = ctx.require_index()
        seed = [*ctx.cfg.seed_packages, *ctx.cfg.extra_packages]
        ctx.closure = resolve_closure(seed, index)
        ctx.records = closure_records(ctx.closure, index)
        logger.info("%d packages to stage", len(ctx.records))
