from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol

from .acquire import CachedArtifact
from .command import run_cmd
from .errors import CommandError, ExtractionError

logger = logging.getLogger(__name__)

# Package metadata members that must not land in the staging root.
METADATA_MEMBERS = (".PKGINFO", ".MTREE", ".BUILDINFO", ".INSTALL")


class Extractor(Protocol):
    def extract(self, archive: Path, dest: Path) -> None:
        ...


class TarExtractor:
    def extract(self, archive: Path, dest: Path) -> None:
        excludes = [f"--exclude={m}" for m in METADATA_MEMBERS]
        run_cmd(["tar", "-C", str(dest), *excludes, "-xf", str(archive)])


def extract_artifacts(
    artifacts: Iterable[CachedArtifact],
    staging_root: Path,
    extractor: Extractor,
) -> int:
    """Overlay every artifact onto the staging root; returns the count."""

    logger.info("Extracting packages ...")
    count = 0
    for a in artifacts:
        try:
            extractor.extract(a.path, staging_root)
        except CommandError as e:
            raise ExtractionError(f"Failed to extract {a.path.name}; {staging_root} is corrupt") from e
        count += 1
    return count
