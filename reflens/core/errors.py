"""Error taxonomy surfaced to callers, plus engine-error classification."""

from __future__ import annotations

import re
from typing import Any

_COUNT_RE = re.compile(r"resolved to (\d+) elements")


class RefLensError(Exception):
    """Base class for all reflens errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnknownRefError(RefLensError):
    """The ref is not in the page's current table. Re-snapshot."""

    def __init__(self, ref: str, *, stale: bool = False) -> None:
        self.ref = ref
        self.stale = stale
        if stale:
            message = (
                f'Ref "{ref}" was invalidated by a newer snapshot. '
                "Use a ref from the latest snapshot."
            )
        else:
            message = (
                f'Unknown ref "{ref}". Run a new snapshot and use a ref from that snapshot.'
            )
        super().__init__(message, {"ref": ref, "stale": stale})


class AmbiguousMatchError(RefLensError):
    def __init__(self, ref: str, count: int | None = None) -> None:
        self.ref = ref
        self.count = count
        shown = count if count is not None else "multiple"
        super().__init__(
            f'Selector "{ref}" matched {shown} elements. '
            "Run a new snapshot to get updated refs, or use a different ref.",
            {"ref": ref, "count": count},
        )


class NotInteractableError(RefLensError):
    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(
            f'Element "{ref}" is not interactable (hidden or covered). '
            "Try scrolling it into view, closing overlays, or re-snapshotting.",
            {"ref": ref},
        )


class ElementNotFoundError(RefLensError):
    """Timed out waiting for the element to appear or become visible."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(
            f'Element "{ref}" not found or not visible. '
            "Run a new snapshot to see current page elements.",
            {"ref": ref},
        )


class ScopeMismatchError(RefLensError):
    def __init__(self, ref: str, expected: str | None, actual: str | None) -> None:
        self.ref = ref
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'Ref "{ref}" belongs to a snapshot scoped to {_scope_label(expected)}, '
            f"but was used in {_scope_label(actual)}.",
            {"ref": ref, "expected": expected, "actual": actual},
        )


class OperationCancelledError(RefLensError):
    def __init__(self, what: str) -> None:
        super().__init__(f"{what} was cancelled", {"operation": what})


class SnapshotError(RefLensError):
    pass


class ConnectionFailedError(RefLensError):
    def __init__(self, endpoint: str, attempts: int) -> None:
        self.endpoint = endpoint
        super().__init__(
            f"Could not connect to {endpoint} after {attempts} attempts",
            {"endpoint": endpoint, "attempts": attempts},
        )


class PageNotFoundError(RefLensError):
    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(
            f"Tab not found (target_id: {target_id}). List open tabs and retry.",
            {"target_id": target_id},
        )


def _scope_label(selector: str | None) -> str:
    return f"frame {selector!r}" if selector else "the main frame"


def classify_engine_error(error: BaseException, ref: str) -> BaseException:
    """
    Map a raw engine failure onto the reflens taxonomy.

    Returns *error* unchanged when its message matches no known pattern.
    """
    message = str(error)

    if "strict mode violation" in message:
        match = _COUNT_RE.search(message)
        return AmbiguousMatchError(ref, int(match.group(1)) if match else None)

    if ("Timeout" in message or "waiting for" in message) and (
        "to be visible" in message or "not visible" in message
    ):
        return ElementNotFoundError(ref)

    if (
        "intercepts pointer events" in message
        or "not visible" in message
        or "not receive pointer events" in message
    ):
        return NotInteractableError(ref)

    return error
