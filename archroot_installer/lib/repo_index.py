"""Reader for an unpacked repository database.

Layout (one directory per package, e.g. ``core/bash-5.2.026-2/``):

    desc      %NAME% / %VERSION% / %FILENAME% / %SHA256SUM% ...
    depends   %DEPENDS% / %PROVIDES%   (older databases only)

Each key line ``%KEY%`` opens a block of value lines closed by a blank line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import PackageNotFound

logger = logging.getLogger(__name__)

_VERSION_SPLIT = re.compile(r"[<>=:\s]")


def strip_version(dep: str) -> str:
    """'glibc>=2.38' -> 'glibc'."""
    return _VERSION_SPLIT.split(dep.strip(), maxsplit=1)[0]


def read_array(path: Path, key: str) -> List[str]:
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except FileNotFoundError:
        return []

    marker = f"%{key}%"
    out: List[str] = []
    it = iter(lines)
    for line in it:
        if line.strip() == marker:
            for value in it:
                value = value.strip()
                if not value:
                    break
                out.append(value)
            break
    return out


def read_value(path: Path, key: str) -> str:
    values = read_array(path, key)
    return values[0] if values else ""


@dataclass(frozen=True)
class PackageRecord:
    name: str
    version: str
    depends: Tuple[str, ...]
    provides: Tuple[str, ...]
    filename: str
    sha256: str
    directory: Path

    @classmethod
    def from_directory(cls, directory: Path) -> "PackageRecord":
        desc = directory / "desc"
        deps = _depends_file(directory)
        return cls(
            name=read_value(desc, "NAME"),
            version=read_value(desc, "VERSION"),
            depends=tuple(read_array(deps, "DEPENDS")),
            provides=tuple(read_array(deps, "PROVIDES")),
            filename=read_value(desc, "FILENAME"),
            sha256=read_value(desc, "SHA256SUM"),
            directory=directory,
        )


def _depends_file(directory: Path) -> Path:
    deps = directory / "depends"
    return deps if deps.exists() else directory / "desc"


class RepoIndex:
    """Name lookups over one unpacked repository database."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._dirs: Dict[str, Path] = {}
        self._records: Dict[Path, PackageRecord] = {}

    def _package_dirs(self) -> List[Path]:
        return sorted(p for p in self.root.iterdir() if p.is_dir())

    def find_directory(self, name: str) -> Optional[Path]:
        if name in self._dirs:
            return self._dirs[name]

        found: Optional[Path] = None
        dirs = self._package_dirs()
        for d in dirs:
            if d.name.startswith(f"{name}-") and read_value(d / "desc", "NAME") == name:
                found = d
                break

        if found is None:
            for d in dirs:
                provided = [strip_version(p) for p in read_array(_depends_file(d), "PROVIDES")]
                if name in provided:
                    logger.debug("%s provided by %s", name, d.name)
                    found = d
                    break

        if found is not None:
            self._dirs[name] = found
        return found

    def package_directory(self, name: str) -> Path:
        d = self.find_directory(name)
        if d is None:
            logger.error("Package '%s' not found.", name)
            raise PackageNotFound(name)
        return d

    def record(self, name: str) -> PackageRecord:
        d = self.package_directory(name)
        if d not in self._records:
            self._records[d] = PackageRecord.from_directory(d)
        return self._records[d]

    def dependencies(self, name: str) -> List[str]:
        return list(self.record(name).depends)
