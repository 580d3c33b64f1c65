from __future__ import annotations

from ..lib.acquire import acquire_artifacts
from ..pipeline import BootstrapCtx


class DownloadPackagesStep:
    step_id = "40_download"

    def run(self, ctx: BootstrapCtx) -> None:
        ctx.artifacts = acquire_artifacts(
            ctx.records,
            cache_dir=ctx.paths.packages_dir,
            mirror=ctx.cfg.mirror,
            repo=ctx.cfg.repo,
            arch=ctx.cfg.arch,
            fetcher=ctx.tools.fetcher,
            hasher=ctx.tools.hasher,
        )
