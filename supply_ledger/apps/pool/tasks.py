from __future__ import annotations

import logging
from typing import Any, Dict

from celery import shared_task
from django.db import transaction
from django.utils import timezone

from supply_ledger.apps.pool.models import PoolAccount, PoolSnapshot, PoolState
from supply_ledger.apps.pool.services.ledger import get_default_ledger
from supply_ledger.apps.pool.fixed_point import present_value

logger = logging.getLogger(__name__)


def _principal_drift() -> Dict[str, int]:
    """Compare the pool counter with the sum of account principals."""
    # hold the pool lock so no update lands between the two reads
    with transaction.atomic():
        state = PoolState.load(for_update=True)
        # summed in Python: the column is TEXT outside PostgreSQL
        summed = sum(PoolAccount.objects.values_list("principal", flat=True))
    recorded = state.total_principal
    return {
        "recorded": recorded,
        "summed": summed,
        "drift": recorded - summed,
    }


@shared_task(queue="pool")
def snapshot_pool() -> Dict[str, Any]:
    """
    Record total pooled value and projected indices for reporting.
    Scheduled by Celery beat (POOL_SNAPSHOT_INTERVAL).
    """
    ledger = get_default_ledger()
    indices = ledger.engine.projected_supply_indices()
    drift = _principal_drift()
    total_principal = drift["recorded"]

    snapshot = PoolSnapshot.objects.create(
        at=timezone.now(),
        total_pooled_value=present_value(indices.base_supply_index, total_principal),
        total_principal=total_principal,
        base_supply_index=indices.base_supply_index,
        tracking_supply_index=indices.tracking_supply_index,
        account_count=PoolAccount.objects.count(),
        principal_drift=drift["drift"],
    )
    logger.info(
        f"Pool snapshot at {snapshot.at.isoformat()}: value={snapshot.total_pooled_value} "
        f"principal={snapshot.total_principal}"
    )
    return {
        "at": snapshot.at.isoformat(),
        "total_pooled_value": snapshot.total_pooled_value,
        "total_principal": total_principal,
        "base_supply_index": indices.base_supply_index,
        "tracking_supply_index": indices.tracking_supply_index,
    }


@shared_task(queue="pool")
def reconcile_pool() -> Dict[str, int]:
    """Check that the pool principal counter matches the per-account sum."""
    drift = _principal_drift()
    if drift["drift"] != 0:
        logger.error(
            f"Pool principal drift: recorded={drift['recorded']} summed={drift['summed']}"
        )
    else:
        logger.info(f"Pool principal reconciled: {drift['recorded']}")
    return drift
