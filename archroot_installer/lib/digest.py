from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Protocol

CHUNK_SIZE = 1024 * 1024


class Hasher(Protocol):
    def digest(self, path: Path) -> str:
        ...

    def verify(self, path: Path, expected: str) -> bool:
        ...


class Sha256Hasher:
    def digest(self, path: Path) -> str:
        h = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                h.update(chunk)
        return h.hexdigest()

    def verify(self, path: Path, expected: str) -> bool:
        """True only if the file exists and matches; an empty checksum never matches."""
        if not expected or not path.is_file():
            return False
        return self.digest(path) == expected.strip().lower()
