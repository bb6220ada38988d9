"""Delay policies used while running consensus sessions."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

_U64_MAX = 2**64 - 1


def _saturating_round_ms(value: float) -> int:
    """Round half away from zero and clamp into the unsigned 64-bit range."""
    if math.isnan(value) or value <= 0:
        return 0
    if math.isinf(value) or value >= _U64_MAX:
        return _U64_MAX
    return min(math.floor(value + 0.5), _U64_MAX)


def exponential_slowdown(
    t: int, base_delay: float, start_exp_delay: int, exp_base: float
) -> int:
    """Delay in milliseconds for round ``t``.

    Gives ``base_delay`` for ``t < start_exp_delay`` and
    ``base_delay * exp_base ** (t - start_exp_delay)`` from then on, rounded
    and saturated to the unsigned 64-bit range.
    """
    if t < 0:
        raise ValueError("round number must not be negative")
    if t < start_exp_delay:
        delay = float(base_delay)
    else:
        try:
            delay = base_delay * math.pow(exp_base, t - start_exp_delay)
        except OverflowError:
            delay = math.copysign(math.inf, base_delay)
    return _saturating_round_ms(delay)


class JustificationRequestDelay:
    """Decides when a justification may be requested from peers.

    A request is allowed once more than ``delay_ms`` has passed since the last
    finalized block and more than twice that since the last request. ``clock``
    returns the current time in seconds.
    """

    def __init__(
        self,
        session_period: int,
        millisecs_per_block: int,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if session_period < 0 or millisecs_per_block < 0:
            raise ValueError("session period and block time must not be negative")
        self._clock = clock if clock is not None else time.monotonic
        now = self._clock()
        self.last_request_time = now
        self.last_finalization_time = now
        self.delay_ms = min(
            millisecs_per_block * 2,
            millisecs_per_block * session_period // 10,
        )

    def can_request_now(self) -> bool:
        now = self._clock()
        since_finalization = (now - self.last_finalization_time) * 1000
        since_request = (now - self.last_request_time) * 1000
        return since_finalization > self.delay_ms and since_request > 2 * self.delay_ms

    def on_block_finalized(self) -> None:
        self.last_finalization_time = self._clock()

    def on_request_sent(self) -> None:
        self.last_request_time = self._clock()