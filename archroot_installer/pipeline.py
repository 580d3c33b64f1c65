from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .config import InstallerConfig
from .lib.acquire import CachedArtifact
from .lib.chroot import CommandMounter, Mounter, MountStack
from .lib.digest import Hasher, Sha256Hasher
from .lib.env import Paths
from .lib.extract import Extractor, TarExtractor
from .lib.net import Fetcher, WgetFetcher
from .lib.pkg import PackageInstaller, PacmanInstaller
from .lib.repo_index import PackageRecord, RepoIndex
from .lib.resolver import DependencySet

logger = logging.getLogger(__name__)


@dataclass
class Toolkit:
    """External tools the installer drives, one adapter per tool."""

    mounter: Mounter
    fetcher: Fetcher
    hasher: Hasher
    extractor: Extractor
    installer: PackageInstaller

    @classmethod
    def production(cls) -> "Toolkit":
        return cls(
            mounter=CommandMounter(),
            fetcher=WgetFetcher(),
            hasher=Sha256Hasher(),
            extractor=TarExtractor(),
            installer=PacmanInstaller(),
        )


@dataclass
class BootstrapCtx:
    """In-memory state of one Bootstrap run. Never persisted."""

    cfg: InstallerConfig
    paths: Paths
    tools: Toolkit
    self_path: str
    mounts: MountStack
    confirm: Callable[[], bool] = lambda: False
    index: Optional[RepoIndex] = None
    closure: DependencySet = field(default_factory=dict)
    records: List[PackageRecord] = field(default_factory=list)
    artifacts: List[CachedArtifact] = field(default_factory=list)

    @property
    def staging_root(self) -> str:
        return self.paths.staging_root

    def require_index(self) -> RepoIndex:
        if self.index is None:
            raise RuntimeError("repository index not loaded; run the index step first")
        return self.index


class Step(Protocol):
    """A single stage of the Bootstrap run."""

    step_id: str

    def run(self, ctx: BootstrapCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: BootstrapCtx,
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps strictly in order; the first failure aborts the run."""

    ran: List[str] = []
    for step in steps:
        logger.info("Running step %s", step.step_id)
        step.run(ctx)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(ran_steps=ran)
