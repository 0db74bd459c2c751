"""
Supply index projection.

The rate source only re-anchors its indices when somebody interacts with it.
Between those refreshes the pool still needs an up-to-date view, so the
engine extrapolates from the last anchor using the instantaneous supply rate.
This is simple interest over the gap, recomputed from scratch on every call;
for the short intervals between refreshes the error against true compounding
is negligible and always in the conservative direction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from supply_ledger.apps.pool.errors import ClockRegressionError
from supply_ledger.apps.pool.fixed_point import (
    RATE_SCALE,
    checked_add,
    scaled_mul,
    to_u40,
    to_u64,
)
from supply_ledger.apps.rates.oracle import IndexOracle, OracleSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplyIndices:
    base_supply_index: int
    tracking_supply_index: int
    # rate source anchor the projection started from
    anchor_time: int = 0


class AccrualEngine:
    def __init__(self, oracle: IndexOracle, clock: Optional[Callable[[], int]] = None):
        self.oracle = oracle
        self.clock = clock or oracle.current_timestamp

    def projected_supply_index(
        self, elapsed_seconds: int, snapshot: Optional[OracleSnapshot] = None
    ) -> SupplyIndices:
        """
        Project the oracle's indices ``elapsed_seconds`` past its last accrual.

        Zero elapsed time returns the oracle values untouched, so repeated
        calls within the same instant never move the index.
        """
        if elapsed_seconds < 0:
            raise ClockRegressionError(f"elapsed time is negative: {elapsed_seconds}s")

        if snapshot is None:
            snapshot = self.oracle.get_supply_indices()
        base = snapshot.base_supply_index
        tracking = snapshot.tracking_supply_index

        if elapsed_seconds == 0:
            return SupplyIndices(base, tracking, snapshot.last_accrual_time)

        supply_rate = self.oracle.get_supply_rate(self.oracle.get_utilization())
        base = to_u64(checked_add(base, scaled_mul(base, supply_rate * elapsed_seconds, RATE_SCALE)))
        tracking = self._project_tracking(tracking, snapshot.total_supply_base, elapsed_seconds)

        return SupplyIndices(base, tracking, snapshot.last_accrual_time)

    def _project_tracking(self, tracking: int, total_supply_base: int, elapsed_seconds: int) -> int:
        # rewards only accrue once the market holds the configured minimum
        if total_supply_base <= 0 or total_supply_base < self.oracle.get_base_min_for_rewards():
            return tracking
        speed = self.oracle.get_base_tracking_supply_speed()
        if speed <= 0:
            return tracking
        increment = scaled_mul(speed * elapsed_seconds, self.oracle.get_base_scale(), total_supply_base)
        return to_u64(checked_add(tracking, increment))

    def projected_supply_indices(self, now: Optional[int] = None) -> SupplyIndices:
        """Indices projected from the oracle's last accrual up to ``now`` (default: the clock)."""
        snapshot = self.oracle.get_supply_indices()
        anchor = to_u40(snapshot.last_accrual_time)
        now = to_u40(self.clock() if now is None else now)
        if now < anchor:
            logger.error(f"Clock regression: now={now} is before oracle anchor {anchor}")
            raise ClockRegressionError(f"clock {now} is before last accrual {anchor}")
        return self.projected_supply_index(now - anchor, snapshot=snapshot)
