from django.http import JsonResponse
from django.views.decorators.http import require_GET

from supply_ledger.apps.pool.errors import AccrualError, OracleUnavailable
from supply_ledger.apps.pool.services.ledger import get_default_ledger

import logging

logger = logging.getLogger(__name__)

# Amounts are serialised as strings: uint104 values do not survive a JSON number
# round trip in most clients.


def _error(exc: AccrualError) -> JsonResponse:
    status = 503 if isinstance(exc, OracleUnavailable) else 400
    return JsonResponse({"error": exc.__class__.__name__, "detail": str(exc)}, status=status)


@require_GET
def pool_total(request):
    try:
        ledger = get_default_ledger()
        value = ledger.total_pooled_value()
    except AccrualError as e:
        logger.warning(f"pool_total failed: {e}")
        return _error(e)

    return JsonResponse({
        "total_pooled_value": str(value),
        "total_principal": str(ledger.total_principal()),
    })


@require_GET
def account_detail(request, account: str):
    try:
        ledger = get_default_ledger()
        record = ledger.get_account(account)
        if record is None:
            return JsonResponse({"error": "Account not found"}, status=404)
        balance = ledger.balance_of(account)
    except AccrualError as e:
        logger.warning(f"account_detail failed for {account}: {e}")
        return _error(e)

    return JsonResponse({
        "account": record.account,
        "principal": str(record.principal),
        "balance": str(balance),
        "tracking_accrued": str(record.tracking_accrued),
        "tracking_index": str(record.tracking_index),
    })
