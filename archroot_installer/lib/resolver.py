from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Protocol, Sequence

from .repo_index import PackageRecord, strip_version

logger = logging.getLogger(__name__)

DependencySet = Dict[str, bool]


class DependencySource(Protocol):
    def dependencies(self, name: str) -> Sequence[str]:
        ...


class RecordSource(Protocol):
    def record(self, name: str) -> PackageRecord:
        ...


def resolve_closure(seed: Iterable[str], source: DependencySource) -> DependencySet:
    """Smallest superset of ``seed`` closed under the depends relation.

    Fixed-point iteration: each pass walks a snapshot of the current members
    and adds any missing dependency name. Stops after a pass that adds
    nothing. Members are never removed, so cycles need no special handling.
    """

    needed: DependencySet = {}
    for name in seed:
        needed[strip_version(name)] = True

    logger.info("Calculating dependencies ...")
    passes = 0
    dirty = True
    while dirty:
        dirty = False
        passes += 1
        for pkg in list(needed):
            for line in source.dependencies(pkg):
                dep = strip_version(line)
                if dep and dep not in needed:
                    needed[dep] = True
                    dirty = True

    logger.info("Resolved %d package names in %d passes", len(needed), passes)
    return needed


def closure_records(needed: DependencySet, source: RecordSource) -> List[PackageRecord]:
    """Records backing a closure, one per package (provided names collapse)."""

    seen: Dict[str, PackageRecord] = {}
    for name, flag in needed.items():
        if not flag:
            continue
        rec = source.record(name)
        seen.setdefault(rec.name, rec)
    return list(seen.values())
