"""
Tests for the web3-backed Comet rate source.
"""
from unittest.mock import MagicMock

import pytest
from web3.exceptions import ContractLogicError

from supply_ledger.apps.pool.errors import OracleUnavailable
from supply_ledger.apps.pool.fixed_point import BASE_INDEX_SCALE
from supply_ledger.apps.pool.services.accrual import AccrualEngine
from supply_ledger.apps.pool.services.ledger import PrincipalLedger
from supply_ledger.apps.rates.oracle import OracleSnapshot
from supply_ledger.apps.rates.services.comet_rates import CometRateService

ACCRUED_AT = 1_700_000_000


@pytest.fixture
def contract():
    contract = MagicMock()
    functions = contract.functions
    functions.totalsBasic.return_value.call.return_value = (
        BASE_INDEX_SCALE,          # baseSupplyIndex
        BASE_INDEX_SCALE,          # baseBorrowIndex
        3 * BASE_INDEX_SCALE,      # trackingSupplyIndex
        0,                         # trackingBorrowIndex
        10**12,                    # totalSupplyBase
        5 * 10**11,                # totalBorrowBase
        ACCRUED_AT,                # lastAccrualTime
        0,                         # pauseFlags
    )
    functions.getUtilization.return_value.call.return_value = 5 * 10**17
    functions.getSupplyRate.return_value.call.return_value = 10**9
    functions.baseTrackingSupplySpeed.return_value.call.return_value = 0
    functions.baseMinForRewards.return_value.call.return_value = 10**6
    functions.baseScale.return_value.call.return_value = 10**6
    return contract


@pytest.fixture
def web3(contract):
    web3 = MagicMock()
    web3.eth.contract.return_value = contract
    web3.eth.get_block.return_value = {"timestamp": ACCRUED_AT + 100}
    return web3


@pytest.fixture
def comet(web3):
    return CometRateService(web3=web3)


class TestCometRateService:
    def test_maps_totals_basic(self, comet):
        assert comet.get_supply_indices() == OracleSnapshot(
            base_supply_index=BASE_INDEX_SCALE,
            tracking_supply_index=3 * BASE_INDEX_SCALE,
            last_accrual_time=ACCRUED_AT,
            total_supply_base=10**12,
        )

    def test_rate_reads(self, comet, contract):
        assert comet.get_utilization() == 5 * 10**17
        assert comet.get_supply_rate(5 * 10**17) == 10**9
        contract.functions.getSupplyRate.assert_called_with(5 * 10**17)

    def test_base_scale_is_cached(self, comet, contract):
        assert comet.get_base_scale() == 10**6
        assert comet.get_base_scale() == 10**6
        assert contract.functions.baseScale.call_count == 1

    def test_clock_is_latest_block(self, comet, web3):
        assert comet.current_timestamp() == ACCRUED_AT + 100
        web3.eth.get_block.assert_called_with("latest")

    def test_revert_becomes_oracle_unavailable(self, comet, contract):
        contract.functions.getUtilization.return_value.call.side_effect = ContractLogicError(
            "execution reverted"
        )

        with pytest.raises(OracleUnavailable):
            comet.get_utilization()

    def test_connection_error_becomes_oracle_unavailable(self, comet, contract):
        contract.functions.totalsBasic.return_value.call.side_effect = ConnectionError("refused")

        with pytest.raises(OracleUnavailable):
            comet.get_supply_indices()


def test_projection_from_chain_reads(comet):
    engine = AccrualEngine(comet)

    indices = engine.projected_supply_indices()

    # 100s at 1e9 per second on a 1e15 index
    assert indices.base_supply_index == BASE_INDEX_SCALE + 10**8
    assert indices.tracking_supply_index == 3 * BASE_INDEX_SCALE


@pytest.mark.django_db
def test_ledger_against_chain_reads(comet):
    ledger = PrincipalLedger(AccrualEngine(comet))

    ledger.update_principal("0x1111111111111111111111111111111111111111", 1000)

    assert ledger.principal_of("0x1111111111111111111111111111111111111111") == 999
    assert ledger.total_pooled_value() == 999
