from __future__ import annotations

import logging
from typing import List, Protocol, Tuple

from .command import run_cmd

logger = logging.getLogger(__name__)


class Mounter(Protocol):
    def mount(self, fstype: str, source: str, target: str) -> None:
        ...

    def bind(self, source: str, target: str) -> None:
        ...

    def umount(self, target: str, *, lazy: bool = False) -> None:
        ...

    def remount_rw(self, target: str) -> None:
        ...


class CommandMounter:
    """Mounter backed by the mount(8)/umount(8) tools."""

    def mount(self, fstype: str, source: str, target: str) -> None:
        run_cmd(["mount", "-t", fstype, source, target])

    def bind(self, source: str, target: str) -> None:
        run_cmd(["mount", "--bind", source, target])

    def umount(self, target: str, *, lazy: bool = False) -> None:
        argv = ["umount"]
        if lazy:
            argv.append("-l")
        run_cmd([*argv, target])

    def remount_rw(self, target: str) -> None:
        run_cmd(["mount", "-o", "remount,rw", target])


# (fstype, source, path relative to the target root); fstype None means bind.
VIRTUAL_FILESYSTEMS: List[Tuple[str | None, str, str]] = [
    ("proc", "proc", "proc"),
    ("sysfs", "sys", "sys"),
    (None, "/dev", "dev"),
    ("devpts", "pts", "dev/pts"),
]


class MountStack:
    """Mounts acquired during a run, released in reverse order."""

    def __init__(self, mounter: Mounter) -> None:
        self.mounter = mounter
        self.mounted: List[str] = []

    def mount(self, fstype: str, source: str, target: str) -> None:
        self.mounter.mount(fstype, source, target)
        self.mounted.append(target)

    def bind(self, source: str, target: str) -> None:
        self.mounter.bind(source, target)
        self.mounted.append(target)

    def release_all(self) -> None:
        """Best-effort unmount; each failure is logged and the rest still run."""
        while self.mounted:
            target = self.mounted.pop()
            try:
                self.mounter.umount(target)
            except Exception as e:
                logger.warning("Failed to unmount %s: %s", target, e)


def mount_virtual_filesystems(stack: MountStack, target_root: str) -> None:
    logger.info("Mounting virtual filesystems ...")
    for fstype, source, rel in VIRTUAL_FILESYSTEMS:
        dst = f"{target_root.rstrip('/')}/{rel}"
        if fstype is None:
            stack.bind(source, dst)
        else:
            stack.mount(fstype, source, dst)
