from __future__ import annotations

import logging

from ..lib.net import repo_url
from ..lib.repo_index import RepoIndex
from ..pipeline import BootstrapCtx

logger = logging.getLogger(__name__)


class FetchIndexStep:
    step_id = "20_fetch_index"

    def run(self, ctx: BootstrapCtx) -> None:
        cfg = ctx.cfg
        workdir = ctx.paths.installer_dir
        db_name = f"{cfg.repo}.db"
        db_path = workdir / db_name
        unpack_dir = workdir / cfg.repo

        logger.info("Downloading package database ...")
        ctx.tools.fetcher.fetch(repo_url(cfg.mirror, cfg.repo, cfg.arch, db_name), db_path)

        logger.info("Unpacking package database ...")
        unpack_dir.mkdir(parents=True, exist_ok=True)
        ctx.tools.extractor.extract(db_path, unpack_dir)

        ctx.index = RepoIndex(unpack_dir)
