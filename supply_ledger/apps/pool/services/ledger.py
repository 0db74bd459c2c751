"""
Principal ledger: per-account principal and reward tracking, plus the
pool-wide principal counter.

Every mutation runs inside one database transaction and starts by locking
the PoolState row. That lock is the single-writer guarantee for
``total_principal``: concurrent callers (threads, web workers, Celery
workers) queue behind it, and any exception, including a failing oracle
read, rolls the whole update back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional, Union

from django.db import transaction

from supply_ledger.apps.pool.errors import (
    IndexRegressionError,
    NegativeBalanceError,
    PoolInvariantError,
)
from supply_ledger.apps.pool.fixed_point import (
    TRACKING_INDEX_SCALE,
    checked_add,
    present_value,
    principal_value,
    scaled_mul,
    to_u40,
    to_u64,
    to_u104,
)
from supply_ledger.apps.pool.models import PoolAccount, PoolState, PrincipalUpdate
from supply_ledger.apps.pool.services.accrual import AccrualEngine, SupplyIndices

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRecord:
    account: str
    principal: int
    tracking_accrued: int
    tracking_index: int


class PrincipalLedger:
    """
    Takes either a ready engine or a zero-argument factory. A factory is only
    called the first time an index is needed, so reads of an empty pool never
    touch the rate source.
    """

    def __init__(self, engine: Union[AccrualEngine, Callable[[], AccrualEngine]]):
        self._engine = engine

    @property
    def engine(self) -> AccrualEngine:
        if not isinstance(self._engine, AccrualEngine):
            self._engine = self._engine()
        return self._engine

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------

    def update_principal(self, account: str, signed_delta: int) -> AccountRecord:
        """
        Settle ``account`` at the current indices and apply a present-value delta.

        A positive delta is a deposit, a negative one a withdrawal and zero a
        pure accrual settlement. Call this before minting or burning shares.
        """
        with transaction.atomic():
            state = PoolState.load(for_update=True)
            acc, created = PoolAccount.objects.select_for_update().get_or_create(account=account)
            if created:
                logger.info(f"Created pool account {account}")

            indices = self.engine.projected_supply_indices()
            self._check_not_behind(state, indices)

            old_principal = acc.principal
            tracking_accrued, tracking_gain = self._settle_tracking(acc, indices.tracking_supply_index)

            new_principal = old_principal
            if signed_delta != 0:
                balance = present_value(indices.base_supply_index, old_principal)
                new_balance = balance + signed_delta
                if new_balance < 0:
                    logger.warning(
                        f"Rejected withdrawal for {account}: delta={signed_delta} balance={balance}"
                    )
                    raise NegativeBalanceError(account, balance, signed_delta)
                new_principal = principal_value(indices.base_supply_index, new_balance)

            total = state.total_principal + (new_principal - old_principal)
            if total < 0:
                logger.error(
                    f"Pool principal would go negative ({total}) updating {account}"
                )
                raise PoolInvariantError(f"total principal would become {total}")

            acc.principal = new_principal
            acc.tracking_accrued = tracking_accrued
            acc.tracking_index = indices.tracking_supply_index
            acc.save(update_fields=["principal", "tracking_accrued", "tracking_index", "updated_at"])

            state.total_principal = total
            state.last_accrual_timestamp = to_u40(indices.anchor_time)
            state.base_supply_index = indices.base_supply_index
            state.save(update_fields=[
                "total_principal", "last_accrual_timestamp", "base_supply_index", "updated_at",
            ])

            PrincipalUpdate.objects.create(
                account=account,
                present_delta=signed_delta,
                principal_before=old_principal,
                principal_after=new_principal,
                base_supply_index=indices.base_supply_index,
                tracking_supply_index=indices.tracking_supply_index,
                tracking_accrued_delta=tracking_gain,
            )

        logger.info(
            f"Updated principal for {account}: {old_principal} -> {new_principal} "
            f"(delta={signed_delta}, base_index={indices.base_supply_index})"
        )
        return AccountRecord(account, new_principal, tracking_accrued, indices.tracking_supply_index)

    def _settle_tracking(self, acc: PoolAccount, tracking_supply_index: int):
        """Return (new tracking_accrued, amount accrued in this settlement)."""
        index_delta = tracking_supply_index - acc.tracking_index
        if index_delta < 0:
            logger.error(
                f"Tracking index regressed for {acc.account}: "
                f"{tracking_supply_index} < {acc.tracking_index}"
            )
            raise IndexRegressionError(
                f"tracking index moved backward for {acc.account}"
            )
        gain = scaled_mul(acc.principal, index_delta, TRACKING_INDEX_SCALE)
        return to_u64(checked_add(acc.tracking_accrued, gain, 64)), gain

    def _check_not_behind(self, state: PoolState, indices: SupplyIndices):
        if indices.anchor_time < state.last_accrual_timestamp:
            logger.error(
                f"Oracle anchor {indices.anchor_time} is older than the pool's "
                f"last anchor {state.last_accrual_timestamp}"
            )
            raise IndexRegressionError("rate source anchor moved backward")
        if indices.base_supply_index < state.base_supply_index:
            logger.error(
                f"Base supply index regressed: {indices.base_supply_index} < {state.base_supply_index}"
            )
            raise IndexRegressionError("base supply index moved backward")

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def total_principal(self) -> int:
        state = PoolState.objects.filter(pk=PoolState.SINGLETON_PK).first()
        return state.total_principal if state else 0

    def total_pooled_value(self) -> int:
        """Present value of the whole pool at the projected base index. Read only."""
        total = self.total_principal()
        if total == 0:
            return 0
        indices = self.engine.projected_supply_indices()
        return present_value(indices.base_supply_index, total)

    def get_account(self, account: str) -> Optional[AccountRecord]:
        acc = PoolAccount.objects.filter(account=account).first()
        if acc is None:
            return None
        return AccountRecord(
            account=acc.account,
            principal=to_u104(acc.principal),
            tracking_accrued=acc.tracking_accrued,
            tracking_index=acc.tracking_index,
        )

    def principal_of(self, account: str) -> int:
        record = self.get_account(account)
        return record.principal if record else 0

    def tracking_accrued_of(self, account: str) -> int:
        record = self.get_account(account)
        return record.tracking_accrued if record else 0

    def balance_of(self, account: str) -> int:
        """Present value of the account's principal at the projected base index."""
        principal = self.principal_of(account)
        if principal == 0:
            return 0
        indices = self.engine.projected_supply_indices()
        return present_value(indices.base_supply_index, principal)


@lru_cache(maxsize=1)
def default_engine() -> AccrualEngine:
    """
    Engine over the configured Comet market, built once per process.

    A failed build (RPC unreachable) raises ``OracleUnavailable`` and is not
    cached, so the next call tries again.
    """
    from supply_ledger.apps.rates.services.comet_rates import CometRateService

    return AccrualEngine(CometRateService())


def get_default_ledger() -> PrincipalLedger:
    """Ledger wired to the configured Comet market."""
    return PrincipalLedger(default_engine)
