from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence

from .config import InstallerConfig, load_config
from .lib.chroot import MountStack
from .lib.command import ensure_default_path, run_cmd
from .lib.env import PATHS, Paths
from .lib.errors import InstallerError, PreconditionError
from .logging_utils import configure_logging
from .phases import Phase, collect_observables, derive_phase, perform, plan_init_role
from .pipeline import BootstrapCtx, PipelineResult, Toolkit, run_pipeline
from .steps import (
    DownloadPackagesStep,
    ExtractPackagesStep,
    FetchIndexStep,
    InstallBaseSystemStep,
    InstallSelfAsInitStep,
    PreflightStep,
    PrepareStagingStep,
    ResolveDependenciesStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        PreflightStep(),
        PrepareStagingStep(),
        FetchIndexStep(),
        ResolveDependenciesStep(),
        DownloadPackagesStep(),
        ExtractPackagesStep(),
        InstallBaseSystemStep(),
        InstallSelfAsInitStep(),
    ]


def ask_operator() -> bool:
    if not sys.stdin.isatty():
        return False
    response = input("Remove it? (yes or [no]) ")
    return response.strip() == "yes"


def run_bootstrap(
    *,
    cfg: InstallerConfig,
    self_path: str,
    paths: Paths = PATHS,
    tools: Optional[Toolkit] = None,
    confirm: Callable[[], bool] = ask_operator,
    reboot: bool = True,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Stage the new root and install this script as init.

    Mounts acquired along the way are released whether or not a step fails.
    """

    tools = tools or Toolkit.production()
    ctx = BootstrapCtx(
        cfg=cfg,
        paths=paths,
        tools=tools,
        self_path=self_path,
        mounts=MountStack(tools.mounter),
        confirm=confirm,
    )

    try:
        result = run_pipeline(ctx=ctx, steps=build_steps(), stop_after=stop_after)
    except PreconditionError:
        raise
    except Exception:
        logger.exception("Error occurred. Exiting.")
        raise
    finally:
        if ctx.mounts.mounted:
            logger.info("Cleaning up ...")
        ctx.mounts.release_all()

    if reboot and InstallSelfAsInitStep.step_id in result.ran_steps:
        logger.info("Rebooting into %s ...", paths.init_path)
        run_cmd(["reboot"])
    return result


def bootstrap_main(argv: Sequence[str], *, self_path: str) -> int:
    p = argparse.ArgumentParser(prog="archroot-installer")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--log", default=PATHS.log_default, help="Path to installer log")
    p.add_argument("--package", action="append", default=[], help="Extra package for the staged root (repeatable)")
    p.add_argument("--yes", action="store_true", help="Remove stale staging data without asking")
    p.add_argument("--no-reboot", action="store_true", help="Do not reboot after staging")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 40_download)")

    args = p.parse_args(list(argv))

    configure_logging(log_path=args.log)

    cfg = load_config(args.config).with_extra_packages(list(args.package))

    try:
        run_bootstrap(
            cfg=cfg,
            self_path=self_path,
            confirm=(lambda: True) if args.yes else ask_operator,
            reboot=not args.no_reboot,
            stop_after=args.stop_after,
        )
    except PreconditionError as e:
        logger.error("%s", e)
        return 1
    except InstallerError:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    full_argv = list(sys.argv) if argv is None else [sys.argv[0], *argv]

    obs = collect_observables(PATHS, argv0=full_argv[0])
    phase = derive_phase(obs.is_init, obs.self_path, obs.sentinels, PATHS)

    if phase is Phase.BOOTSTRAP:
        return bootstrap_main(full_argv[1:], self_path=obs.self_path)

    ensure_default_path()

    if phase is not Phase.INIT_PASSTHROUGH:
        configure_logging(log_path=None)
        logger.info("Phase: %s", phase.value)

    action = plan_init_role(
        phase,
        obs,
        PATHS,
        argv=full_argv,
        mounter=Toolkit.production().mounter,
    )
    perform(action, fallback=PATHS.shell if obs.is_init else None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
