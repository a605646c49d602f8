from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ref cache
    cache_capacity: int = Field(default=50, ge=1)  # cached (endpoint, target) tables

    # Per-operation timeouts, all in milliseconds
    action_timeout_ms: int = 8000  # click / hover / type / select / drag / fill
    action_max_timeout_ms: int = 60000
    wait_timeout_ms: int = 20000  # waits, scroll-into-view
    snapshot_timeout_ms: int = 5000
    snapshot_max_timeout_ms: int = 60000
    min_timeout_ms: int = 500
    max_timeout_ms: int = 120000

    # Connection retries: 5s, 7s, 9s
    connect_attempts: int = Field(default=3, ge=1)
    connect_timeout_ms: int = 5000
    connect_timeout_step_ms: int = 2000
    connect_backoff_ms: int = 250

    type_delay_ms: int = 75  # per-key delay when typing slowly

    model_config = SettingsConfigDict(env_prefix="REFLENS_")

    def clamp(self, timeout_ms: int | None, fallback: int, max_ms: int | None = None) -> int:
        return normalize_timeout_ms(
            timeout_ms,
            fallback,
            max_ms=self.max_timeout_ms if max_ms is None else max_ms,
            min_ms=self.min_timeout_ms,
        )


def normalize_timeout_ms(
    timeout_ms: int | None,
    fallback: int,
    max_ms: int = 120000,
    min_ms: int = 500,
) -> int:
    """Clamp ``timeout_ms`` (or ``fallback`` when unset) into ``[min_ms, max_ms]``."""
    value = fallback if timeout_ms is None else int(timeout_ms)
    return max(min_ms, min(max_ms, value))
