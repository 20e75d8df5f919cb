"""Port: time source for TTL bookkeeping."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Monotonic seconds."""

    def now(self) -> float: ...


# ---------------------------------------------------------------------------
# Default implementation (pure stdlib, no infra deps)
# ---------------------------------------------------------------------------


class SystemClock:
    """Uses time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()
