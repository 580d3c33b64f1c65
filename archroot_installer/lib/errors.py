from __future__ import annotations

from typing import Sequence


class InstallerError(RuntimeError):
    """Base class for fatal installer conditions."""


class PreconditionError(InstallerError):
    """Host is not eligible for migration; raised before anything is mutated."""


class PackageNotFound(InstallerError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Package '{name}' not found.")
        self.name = name


class FetchError(InstallerError):
    pass


class VerificationError(InstallerError):
    pass


class ExtractionError(InstallerError):
    pass


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}\n{stderr}")
