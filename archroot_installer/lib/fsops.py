from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)


def hardlink_tree(src: Path, dst: Path) -> None:
    """Recreate ``src`` at ``dst`` with every non-directory hard-linked (cp -al)."""

    s = Path(src)
    d = Path(dst)
    if s.is_symlink():
        os.symlink(os.readlink(s), d)
    elif s.is_dir():
        shutil.copytree(s, d, symlinks=True, copy_function=os.link, dirs_exist_ok=True)
    else:
        os.link(s, d)


def remove_entry(path: Path) -> None:
    p = Path(path)
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()


def stale_entries(staging_root: Path, keep: Iterable[str]) -> List[Path]:
    root = Path(staging_root)
    if not root.is_dir():
        return []
    keep_names = set(keep)
    return sorted(p for p in root.iterdir() if p.name not in keep_names)


def clean_staging(staging_root: Path, *, keep: Iterable[str], confirm: Callable[[], bool]) -> bool:
    """Remove leftovers from an earlier attempt if the operator agrees.

    Returns True when the staging root is clean afterwards.
    """

    stale = stale_entries(staging_root, keep)
    if not stale:
        return True

    logger.warning("%s contains a stale installation or other data.", staging_root)
    if not confirm():
        logger.warning("Keeping stale data in %s", staging_root)
        return False

    for p in stale:
        logger.info("Removing %s", p)
        remove_entry(p)
    return True


def finalize_swap(
    live_root: Path,
    *,
    staging_name: str,
    old_root_mount_name: str,
    holding_name: str,
) -> Path:
    """Merge the staged tree into the live root by hard-link.

    ``live_root`` is the old root as mounted inside the staging root, and
    ``live_root/staging_name`` is the staging root itself. Every other top
    level entry of the old root is moved into ``live_root/holding_name``;
    then every staged entry except the old-root mount point is hard-linked
    into place. Returns the holding directory.
    """

    root = Path(live_root)
    staging = root / staging_name
    holding = staging / holding_name

    holding.mkdir()
    for entry in sorted(root.iterdir()):
        if entry.name == staging_name:
            continue
        logger.info("Moving %s -> %s", entry, holding)
        shutil.move(str(entry), str(holding / entry.name))

    final_holding = root / holding_name
    os.rename(holding, final_holding)

    for entry in sorted(staging.iterdir()):
        if entry.name == old_root_mount_name:
            continue
        logger.info("Linking %s -> %s", entry, root / entry.name)
        hardlink_tree(entry, root / entry.name)

    return final_holding
