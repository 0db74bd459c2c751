"""
Tests for the wide integer model field.
"""
import pytest
from django.db import connection

from supply_ledger.apps.pool.fields import WideIntegerField
from supply_ledger.apps.pool.fixed_point import MAX_U64, MAX_U104
from supply_ledger.apps.pool.models import PoolAccount, PoolState, PrincipalUpdate


@pytest.mark.django_db
class TestWideIntegerField:
    def test_uint104_principal_reads_back_exactly(self):
        PoolAccount.objects.create(account="wide", principal=MAX_U104 - 1, tracking_index=MAX_U64)

        acc = PoolAccount.objects.get(account="wide")

        assert acc.principal == MAX_U104 - 1
        assert type(acc.principal) is int
        assert acc.tracking_index == MAX_U64

    def test_sixteen_digit_values_are_not_rounded(self):
        PoolState.objects.create(total_principal=1_234_567_890_123_457, base_supply_index=1_001_734_677_650_937)

        state = PoolState.objects.get()

        assert state.total_principal == 1_234_567_890_123_457
        assert state.base_supply_index == 1_001_734_677_650_937

    def test_negative_values(self):
        PrincipalUpdate.objects.create(
            account="alice",
            present_delta=-(10**30) - 7,
            principal_before=10**30,
            principal_after=0,
            base_supply_index=10**15,
            tracking_supply_index=0,
        )

        assert PrincipalUpdate.objects.get().present_delta == -(10**30) - 7

    def test_values_list_returns_ints(self):
        PoolAccount.objects.create(account="a", principal=10**20)
        PoolAccount.objects.create(account="b", principal=1)

        assert sorted(PoolAccount.objects.values_list("principal", flat=True)) == [1, 10**20]

    def test_filter_by_exact_value(self):
        PoolAccount.objects.create(account="a", principal=9_007_199_254_740_993)

        assert PoolAccount.objects.filter(principal=9_007_199_254_740_993).exists()
        assert not PoolAccount.objects.filter(principal=9_007_199_254_740_992).exists()


class TestConversions:
    def test_to_python(self):
        field = WideIntegerField()

        assert field.to_python(None) is None
        assert field.to_python(12) == 12
        assert field.to_python("1001734677650937") == 1_001_734_677_650_937

    def test_db_type(self):
        expected = "numeric(32, 0)" if connection.vendor == "postgresql" else "text"

        assert WideIntegerField(digits=32).db_type(connection) == expected

    def test_deconstruct_keeps_digits(self):
        _, path, _, kwargs = WideIntegerField(digits=20, default=0).deconstruct()

        assert path == "supply_ledger.apps.pool.fields.WideIntegerField"
        assert kwargs == {"digits": 20, "default": 0}
