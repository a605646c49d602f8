from reflens.snapshot.compactor import compact_tree
from reflens.snapshot.disambiguator import RoleNameTracker
from reflens.snapshot.parser import (
    build_computed_snapshot,
    build_direct_snapshot,
    build_snapshot,
    snapshot_stats,
    truncate_outline,
)
from reflens.snapshot.service import SnapshotTaker

__all__ = [
    "RoleNameTracker",
    "SnapshotTaker",
    "build_computed_snapshot",
    "build_direct_snapshot",
    "build_snapshot",
    "compact_tree",
    "snapshot_stats",
    "truncate_outline",
]
