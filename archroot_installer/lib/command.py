from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from .errors import CommandError

logger = logging.getLogger(__name__)

# Process 1 starts without PATH; chroot, mount and friends live in sbin.
DEFAULT_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def ensure_default_path() -> str:
    """Give this process a usable PATH if it was started without one."""
    if not os.environ.get("PATH"):
        os.environ["PATH"] = DEFAULT_PATH
    return os.environ["PATH"]


def command_env(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    merged = dict(os.environ, **(extra or {}))
    if not merged.get("PATH"):
        merged["PATH"] = DEFAULT_PATH
    return merged


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr; both are logged at DEBUG.
    - With check=True a non-zero exit raises CommandError.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=command_env(env),
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def chroot_cmd(target_root: str, argv: Sequence[str], *, check: bool = True) -> CmdResult:
    """Run a command inside target root."""

    return run_cmd(["chroot", target_root, *argv], check=check)
