"""Read-only view of the external rate source that publishes the supply indices."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class OracleSnapshot:
    """Indices as of the rate source's own last accrual."""

    base_supply_index: int
    tracking_supply_index: int
    last_accrual_time: int
    total_supply_base: int = 0


class IndexOracle(Protocol):
    def get_supply_indices(self) -> OracleSnapshot: ...

    def get_utilization(self) -> int: ...

    def get_supply_rate(self, utilization: int) -> int: ...

    def get_base_tracking_supply_speed(self) -> int: ...

    def get_base_min_for_rewards(self) -> int: ...

    def get_base_scale(self) -> int: ...

    def current_timestamp(self) -> int: ...


class StaticIndexOracle:
    """
    In-memory rate source.

    Used for local development and tests: values are set directly and the
    clock can be pinned with ``now``. ``supply_rate_for`` lets callers model a
    rate curve; otherwise ``supply_rate`` is returned for any utilization.
    """

    def __init__(
        self,
        base_supply_index: int = 10**15,
        tracking_supply_index: int = 0,
        last_accrual_time: int = 0,
        *,
        total_supply_base: int = 0,
        utilization: int = 0,
        supply_rate: int = 0,
        base_tracking_supply_speed: int = 0,
        base_min_for_rewards: int = 0,
        base_scale: int = 10**6,
        now: Optional[int] = None,
    ):
        self.base_supply_index = base_supply_index
        self.tracking_supply_index = tracking_supply_index
        self.last_accrual_time = last_accrual_time
        self.total_supply_base = total_supply_base
        self.utilization = utilization
        self.supply_rate = supply_rate
        self.base_tracking_supply_speed = base_tracking_supply_speed
        self.base_min_for_rewards = base_min_for_rewards
        self.base_scale = base_scale
        self.now = now
        self.supply_rate_for = None

    def get_supply_indices(self) -> OracleSnapshot:
        return OracleSnapshot(
            base_supply_index=self.base_supply_index,
            tracking_supply_index=self.tracking_supply_index,
            last_accrual_time=self.last_accrual_time,
            total_supply_base=self.total_supply_base,
        )

    def get_utilization(self) -> int:
        return self.utilization

    def get_supply_rate(self, utilization: int) -> int:
        if self.supply_rate_for is not None:
            return self.supply_rate_for(utilization)
        return self.supply_rate

    def get_base_tracking_supply_speed(self) -> int:
        return self.base_tracking_supply_speed

    def get_base_min_for_rewards(self) -> int:
        return self.base_min_for_rewards

    def get_base_scale(self) -> int:
        return self.base_scale

    def current_timestamp(self) -> int:
        if self.now is not None:
            return self.now
        return int(time.time())

    def refresh(self, base_supply_index: int, tracking_supply_index: int, at: int):
        """Simulate the rate source accruing and re-anchoring its indices."""
        self.base_supply_index = base_supply_index
        self.tracking_supply_index = tracking_supply_index
        self.last_accrual_time = at
