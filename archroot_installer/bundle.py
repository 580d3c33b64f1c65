"""Build the single-file installer.

The archive's ``__main__`` is the package's own ``__main__.py``, which
raises ``SystemExit(main())`` so the exit status reaches the caller.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import tempfile
import zipapp
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERPRETER = "/usr/bin/env python3"
DEFAULT_OUTPUT = "archroot-installer.pyz"


def build_zipapp(output: str, *, interpreter: str = DEFAULT_INTERPRETER) -> Path:
    pkg = Path(__file__).resolve().parent
    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory() as tmp:
        stage = Path(tmp)
        shutil.copytree(pkg, stage / pkg.name, ignore=shutil.ignore_patterns("__pycache__", "*.pyc"))
        shutil.copyfile(pkg / "__main__.py", stage / "__main__.py")
        zipapp.create_archive(stage, out, interpreter=interpreter)

    logger.info("Wrote %s", out)
    return out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="archroot-installer-bundle")
    p.add_argument("-o", "--output", default=DEFAULT_OUTPUT)
    p.add_argument("-p", "--interpreter", default=DEFAULT_INTERPRETER)
    args = p.parse_args(argv)

    build_zipapp(args.output, interpreter=args.interpreter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
