from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import PreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostFacts:
    euid: int
    uid: int
    os_version: str
    machine: str
    saved_init_present: bool


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore").strip()
    except OSError:
        return ""


def gather_host_facts(*, os_release_file: str, saved_init_path: str) -> HostFacts:
    return HostFacts(
        euid=os.geteuid(),
        uid=os.getuid(),
        os_version=_read_text(Path(os_release_file)),
        machine=platform.machine(),
        saved_init_present=os.path.lexists(saved_init_path),
    )


def check_host(facts: HostFacts, *, os_version_prefix: str, machine: str) -> None:
    """Raise PreconditionError with a specific diagnostic; mutates nothing."""

    if facts.euid != 0 or facts.uid != 0:
        raise PreconditionError("Script must be run as root. Exiting.")

    if not facts.os_version.startswith(os_version_prefix):
        raise PreconditionError(
            f"This script only supports OS version {os_version_prefix}x "
            f"(found {facts.os_version or 'none'}). Exiting."
        )

    if facts.machine != machine:
        raise PreconditionError(f"This script only targets {machine} machines (found {facts.machine}). Exiting.")

    if facts.saved_init_present:
        raise PreconditionError(
            "A saved original init already exists; a previous run is mid-migration. Exiting."
        )

    logger.info("Host OK: version=%s machine=%s", facts.os_version, facts.machine)


def run_preflight(
    *,
    os_release_file: str,
    os_version_prefix: str,
    machine: str,
    saved_init_path: str,
    gather: Optional[Callable[..., HostFacts]] = None,
) -> HostFacts:
    facts = (gather or gather_host_facts)(os_release_file=os_release_file, saved_init_path=saved_init_path)
    check_host(facts, os_version_prefix=os_version_prefix, machine=machine)
    return facts
