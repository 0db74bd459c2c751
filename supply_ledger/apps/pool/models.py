# supply_ledger/pool/models.py
import uuid
from django.db import models

from .fields import WideIntegerField

# uint104 / uint64 values overflow a signed BigIntegerField
U104_DIGITS = 32
U64_DIGITS = 20


class PoolAccount(models.Model):
    """Each depositor's principal and reward-tracking state."""
    account = models.CharField(max_length=64, unique=True, db_index=True)
    principal = WideIntegerField(digits=U104_DIGITS, default=0)
    tracking_accrued = WideIntegerField(digits=U64_DIGITS, default=0)
    tracking_index = WideIntegerField(digits=U64_DIGITS, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.account


class PoolState(models.Model):
    """Pool-wide aggregate. A single row (pk=1); locking it serialises every mutation."""
    SINGLETON_PK = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)
    total_principal = WideIntegerField(digits=U104_DIGITS + 4, default=0)
    last_accrual_timestamp = models.BigIntegerField(default=0)  # seconds, uint40
    base_supply_index = WideIntegerField(digits=U64_DIGITS, default=0)  # last index settled against
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def load(cls, *, for_update: bool = False) -> "PoolState":
        qs = cls.objects.select_for_update() if for_update else cls.objects
        state, _ = qs.get_or_create(pk=cls.SINGLETON_PK)
        return state


class PrincipalUpdate(models.Model):
    """Append-only trail of every settled principal change."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.CharField(max_length=64, db_index=True)
    present_delta = WideIntegerField(digits=U104_DIGITS + 4)
    principal_before = WideIntegerField(digits=U104_DIGITS)
    principal_after = WideIntegerField(digits=U104_DIGITS)
    base_supply_index = WideIntegerField(digits=U64_DIGITS)
    tracking_supply_index = WideIntegerField(digits=U64_DIGITS)
    tracking_accrued_delta = WideIntegerField(digits=U64_DIGITS, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["account", "created_at"], name="pool_update_account_idx")]


class PoolSnapshot(models.Model):
    """Periodic snapshot (Celery beat) for reporting & reconciliation."""
    at = models.DateTimeField(primary_key=True)
    total_pooled_value = WideIntegerField(digits=40)
    total_principal = WideIntegerField(digits=U104_DIGITS + 4)
    base_supply_index = WideIntegerField(digits=U64_DIGITS)
    tracking_supply_index = WideIntegerField(digits=U64_DIGITS)
    account_count = models.PositiveIntegerField(default=0)
    principal_drift = WideIntegerField(digits=U104_DIGITS + 4, default=0)
