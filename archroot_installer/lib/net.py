from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .command import run_cmd
from .errors import CommandError, FetchError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str, dest: Path) -> None:
        ...


class WgetFetcher:
    def fetch(self, url: str, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            run_cmd(["wget", "-nv", url, "-O", str(dest)])
        except CommandError as e:
            raise FetchError(f"Download failed: {url}") from e


def repo_url(mirror: str, repo: str, arch: str, filename: str) -> str:
    return f"{mirror.rstrip('/')}/{repo}/os/{arch}/{filename}"
