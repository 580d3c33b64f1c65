from __future__ import annotations

from pathlib import Path

from ..lib.extract import extract_artifacts
from ..pipeline import BootstrapCtx


class ExtractPackagesStep:
    step_id = "50_extract"

    def run(self, ctx: BootstrapCtx) -> None:
        extract_artifacts(ctx.artifacts, Path(ctx.staging_root), ctx.tools.extractor)
