"""Which role this process plays, and what it does in that role.

Nothing is stored between runs. The phase is recomputed at every start from
three observables: whether we are process 1, the canonical path of the
running script, and which sentinel files exist. Each handler returns the
``ExecReplace`` that ends this process instead of performing it, so callers
(and tests) decide when the process image is actually replaced.
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Sequence

from .lib.chroot import Mounter
from .lib.command import DEFAULT_PATH
from .lib.env import Paths
from .lib.errors import InstallerError
from .lib.fsops import finalize_swap
from .logging_utils import flush_logging

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    BOOTSTRAP = "bootstrap"
    INIT_PASSTHROUGH = "init_passthrough"
    BECOME_INIT = "become_init"
    CHROOT_FINALIZE = "chroot_finalize"
    UNKNOWN = "unknown"


# Sentinel names
SAVED_INIT = "saved_init"
STAGING_ROOT = "staging_root"
OLD_ROOT_MOUNT = "old_root_mount"


@dataclass(frozen=True)
class Observables:
    is_init: bool
    self_path: str
    sentinels: FrozenSet[str]


@dataclass(frozen=True)
class ExecReplace:
    """Replace the current process image with ``argv``."""

    argv: List[str]

    @property
    def target(self) -> str:
        return self.argv[0]


def canonical_self_path(argv0: str) -> str:
    return os.path.realpath(os.path.abspath(argv0))


def collect_observables(paths: Paths, *, argv0: str | None = None) -> Observables:
    present = set()
    if os.path.lexists(paths.saved_init_path):
        present.add(SAVED_INIT)
    if os.path.isdir(paths.staging_root):
        present.add(STAGING_ROOT)
    if os.path.isdir(paths.old_root_mount):
        present.add(OLD_ROOT_MOUNT)
    return Observables(
        is_init=os.getpid() == 1,
        self_path=canonical_self_path(argv0 if argv0 is not None else sys.argv[0]),
        sentinels=frozenset(present),
    )


def derive_phase(is_init: bool, self_path: str, sentinels: Iterable[str], paths: Paths) -> Phase:
    s = frozenset(sentinels)

    if not is_init:
        if self_path != paths.init_path:
            return Phase.BOOTSTRAP
        if SAVED_INIT in s:
            return Phase.INIT_PASSTHROUGH
        return Phase.UNKNOWN

    if self_path == paths.init_path:
        if SAVED_INIT in s and STAGING_ROOT in s:
            return Phase.BECOME_INIT
        return Phase.UNKNOWN

    if self_path == paths.self_copy_path and OLD_ROOT_MOUNT in s:
        return Phase.CHROOT_FINALIZE

    return Phase.UNKNOWN


def init_passthrough(paths: Paths, argv: Sequence[str]) -> ExecReplace:
    return ExecReplace([paths.saved_init_path, *argv[1:]])


def become_init(paths: Paths, *, self_path: str, mounter: Mounter) -> ExecReplace:
    """Running as process 1 from the old root: move into the staging root."""

    live = paths.live_root
    mounter.remount_rw(live)

    # copy of self for the chroot side
    copy = paths.in_staging(paths.self_copy_path)
    copy.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(self_path, copy)
    os.chmod(copy, 0o755)

    # the next boot must use the real init again
    os.replace(paths.saved_init_path, paths.init_path)
    logger.info("Restored original init at %s", paths.init_path)

    old_root = paths.in_staging(paths.old_root_mount)
    old_root.mkdir(exist_ok=True)
    mounter.bind(live, str(old_root))

    try:
        mounter.umount(os.path.join(live, "run"))
    except InstallerError as e:
        logger.warning("Could not unmount /run: %s", e)
    mounter.umount(os.path.join(live, "dev/pts"), lazy=True)
    mounter.umount(os.path.join(live, "dev"), lazy=True)
    mounter.umount(os.path.join(live, "sys"))
    mounter.umount(os.path.join(live, "proc"))

    return ExecReplace(["chroot", paths.staging_root, paths.self_copy_path])


def chroot_finalize(paths: Paths) -> ExecReplace:
    """Running as process 1 inside the staging root: swap it into place."""

    holding = finalize_swap(
        Path(paths.old_root_mount),
        staging_name=Path(paths.staging_root).name,
        old_root_mount_name=Path(paths.old_root_mount).name,
        holding_name=paths.holding_name,
    )
    logger.info("Root swap complete; previous system kept under %s", holding)
    return ExecReplace([paths.shell])


def unknown_state(obs: Observables, paths: Paths) -> ExecReplace:
    logger.warning(
        "Unknown state! You're on your own. (init=%s path=%s sentinels=%s)",
        obs.is_init,
        obs.self_path,
        sorted(obs.sentinels),
    )
    return ExecReplace([paths.shell])


def plan_init_role(
    phase: Phase,
    obs: Observables,
    paths: Paths,
    *,
    argv: Sequence[str],
    mounter: Mounter,
) -> ExecReplace:
    """Run the work of a non-Bootstrap phase and return its terminal action.

    A failure while acting as init leaves the machine needing manual
    recovery, so it is logged and answered with the interactive shell.
    """

    if phase is Phase.INIT_PASSTHROUGH:
        return init_passthrough(paths, argv)
    if phase is Phase.UNKNOWN:
        return unknown_state(obs, paths)

    try:
        if phase is Phase.BECOME_INIT:
            return become_init(paths, self_path=obs.self_path, mounter=mounter)
        if phase is Phase.CHROOT_FINALIZE:
            return chroot_finalize(paths)
    except Exception:
        logger.exception("Phase %s failed; manual recovery required", phase.value)
        return ExecReplace([paths.shell])

    raise ValueError(f"not an init-role phase: {phase}")


def resolve_program(name: str) -> str:
    """Absolute path of ``name`` using PATH, or the sbin-inclusive default."""
    if os.sep in name:
        return name
    found = shutil.which(name, path=os.environ.get("PATH") or DEFAULT_PATH)
    return found or name


def perform(action: ExecReplace, *, fallback: Optional[str] = None) -> None:
    """Replace this process. Does not return.

    While acting as init an exec failure must not end the process, so
    ``fallback`` (the interactive shell) is exec'd instead.
    """

    program = resolve_program(action.target)
    logger.info("exec %s (%s)", " ".join(action.argv), program)
    flush_logging()
    try:
        os.execv(program, action.argv)
    except OSError:
        if fallback is None:
            raise
        logger.exception("exec %s failed; falling back to %s", program, fallback)
        flush_logging()
        os.execv(fallback, [fallback])
