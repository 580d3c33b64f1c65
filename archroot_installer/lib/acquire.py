from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from .digest import Hasher
from .errors import VerificationError
from .net import Fetcher, repo_url
from .repo_index import PackageRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedArtifact:
    package: str
    path: Path
    sha256: str


def artifact_path(cache_dir: Path, filename: str) -> Path:
    return Path(cache_dir) / filename


def ensure_artifact(
    record: PackageRecord,
    *,
    cache_dir: Path,
    mirror: str,
    repo: str,
    arch: str,
    fetcher: Fetcher,
    hasher: Hasher,
) -> CachedArtifact:
    """Make sure a verified copy of ``record``'s artifact is cached.

    A cached file that fails verification is treated as absent. After one
    download the file must verify; there is no second download.
    """

    target = artifact_path(cache_dir, record.filename)
    artifact = CachedArtifact(package=record.name, path=target, sha256=record.sha256)

    if target.exists() and hasher.verify(target, record.sha256):
        logger.debug("Cached %s", target.name)
        return artifact

    fetcher.fetch(repo_url(mirror, repo, arch, record.filename), target)

    if target.exists() and hasher.verify(target, record.sha256):
        return artifact

    logger.error("Couldn't download package '%s'.", record.name)
    raise VerificationError(f"Checksum mismatch for {record.filename} (package {record.name})")


def acquire_artifacts(
    records: Iterable[PackageRecord],
    *,
    cache_dir: Path,
    mirror: str,
    repo: str,
    arch: str,
    fetcher: Fetcher,
    hasher: Hasher,
) -> List[CachedArtifact]:
    logger.info("Downloading packages ...")
    Path(cache_dir).mkdir(parents=True, exist_ok=True)
    return [
        ensure_artifact(
            r,
            cache_dir=cache_dir,
            mirror=mirror,
            repo=repo,
            arch=arch,
            fetcher=fetcher,
            hasher=hasher,
        )
        for r in records
    ]
