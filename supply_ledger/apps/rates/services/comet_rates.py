"""
Comet Rate Source Service
Reads supply indices, utilization and supply rate from a Comet market
"""

from typing import Optional
from django.conf import settings
import logging
from web3 import Web3

from supply_ledger.apps.rates.oracle import OracleSnapshot
from .base_contract import BaseContractService

logger = logging.getLogger(__name__)


class CometRateService(BaseContractService):
    """IndexOracle backed by the on-chain Comet contract"""

    # positions inside the totalsBasic() struct
    TOTALS_BASE_SUPPLY_INDEX = 0
    TOTALS_BASE_BORROW_INDEX = 1
    TOTALS_TRACKING_SUPPLY_INDEX = 2
    TOTALS_TRACKING_BORROW_INDEX = 3
    TOTALS_SUPPLY_BASE = 4
    TOTALS_BORROW_BASE = 5
    TOTALS_LAST_ACCRUAL_TIME = 6

    def __init__(
        self,
        contract_address: Optional[str] = None,
        web3: Optional[Web3] = None,
    ):
        super().__init__(
            contract_address=contract_address or settings.COMET_ADDRESS,
            abi_path=settings.COMET_ABI_PATH,
            web3=web3,
        )
        self._base_scale: Optional[int] = None

    # ============================================================
    # READ-ONLY FUNCTIONS
    # ============================================================

    def get_supply_indices(self) -> OracleSnapshot:
        """
        Get the supply indices as of the market's last accrual

        Returns:
            OracleSnapshot with base/tracking supply index (1e15),
            last accrual time and total supply in principal units
        """
        totals = self.call_read_function('totalsBasic')
        snapshot = OracleSnapshot(
            base_supply_index=int(totals[self.TOTALS_BASE_SUPPLY_INDEX]),
            tracking_supply_index=int(totals[self.TOTALS_TRACKING_SUPPLY_INDEX]),
            last_accrual_time=int(totals[self.TOTALS_LAST_ACCRUAL_TIME]),
            total_supply_base=int(totals[self.TOTALS_SUPPLY_BASE]),
        )
        logger.debug(
            f"Comet totals: base={snapshot.base_supply_index} "
            f"tracking={snapshot.tracking_supply_index} at={snapshot.last_accrual_time}"
        )
        return snapshot

    def get_utilization(self) -> int:
        """Current utilization (1e18)"""
        return int(self.call_read_function('getUtilization'))

    def get_supply_rate(self, utilization: int) -> int:
        """Per-second supply rate (1e18) at the given utilization"""
        return int(self.call_read_function('getSupplyRate', utilization))

    def get_base_tracking_supply_speed(self) -> int:
        return int(self.call_read_function('baseTrackingSupplySpeed'))

    def get_base_min_for_rewards(self) -> int:
        return int(self.call_read_function('baseMinForRewards'))

    def get_base_scale(self) -> int:
        """Base asset scale; immutable on the contract so it is cached"""
        if self._base_scale is None:
            self._base_scale = int(self.call_read_function('baseScale'))
        return self._base_scale

    def current_timestamp(self) -> int:
        return self.get_latest_block_timestamp()
