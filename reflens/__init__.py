from reflens.core.config import Settings
from reflens.core.errors import (
    AmbiguousMatchError,
    ConnectionFailedError,
    ElementNotFoundError,
    NotInteractableError,
    OperationCancelledError,
    PageNotFoundError,
    RefLensError,
    ScopeMismatchError,
    SnapshotError,
    UnknownRefError,
)
from reflens.core.lens import RefLens
from reflens.core.page import RefPage
from reflens.core.types import (
    AddressingMode,
    CacheEntry,
    FormField,
    PageRefSession,
    RefEntry,
    RefTable,
    SnapshotOptions,
    SnapshotResult,
    SnapshotStats,
)

__all__ = [
    "RefLens",
    "RefPage",
    "Settings",
    "AddressingMode",
    "CacheEntry",
    "FormField",
    "PageRefSession",
    "RefEntry",
    "RefTable",
    "SnapshotOptions",
    "SnapshotResult",
    "SnapshotStats",
    # Errors
    "AmbiguousMatchError",
    "ConnectionFailedError",
    "ElementNotFoundError",
    "NotInteractableError",
    "OperationCancelledError",
    "PageNotFoundError",
    "RefLensError",
    "ScopeMismatchError",
    "SnapshotError",
    "UnknownRefError",
]
