"""
Tests for the Celery reporting tasks and the pool_report command.
"""
import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from supply_ledger.apps.pool.fixed_point import BASE_INDEX_SCALE
from supply_ledger.apps.pool.models import PoolSnapshot, PoolState
from supply_ledger.apps.pool.tasks import reconcile_pool, snapshot_pool

from .conftest import ANCHOR


@pytest.mark.django_db
class TestSnapshotPool:
    def test_records_projected_value(self, oracle, default_ledger):
        default_ledger.update_principal("alice", 1500)
        oracle.refresh(2 * BASE_INDEX_SCALE, 10**15, at=ANCHOR + 60)
        oracle.now = ANCHOR + 60

        result = snapshot_pool()

        snapshot = PoolSnapshot.objects.get()
        assert snapshot.total_pooled_value == 3000
        assert snapshot.total_principal == 1500
        assert snapshot.base_supply_index == 2 * BASE_INDEX_SCALE
        assert snapshot.account_count == 1
        assert snapshot.principal_drift == 0
        assert result["total_pooled_value"] == 3000

    def test_runs_through_celery(self, default_ledger):
        default_ledger.update_principal("alice", 10)

        result = snapshot_pool.delay().get()

        assert result["total_principal"] == 10
        assert PoolSnapshot.objects.count() == 1


@pytest.mark.django_db
class TestReconcilePool:
    def test_consistent_pool(self, default_ledger):
        default_ledger.update_principal("alice", 700)
        default_ledger.update_principal("bob", 300)

        assert reconcile_pool() == {"recorded": 1000, "summed": 1000, "drift": 0}

    def test_reports_drift(self, default_ledger):
        default_ledger.update_principal("alice", 700)
        PoolState.objects.filter(pk=PoolState.SINGLETON_PK).update(total_principal=750)

        assert reconcile_pool()["drift"] == 50


@pytest.mark.django_db
class TestPoolReportCommand:
    def test_pool_totals(self, default_ledger):
        default_ledger.update_principal("alice", 1234)
        out = StringIO()

        call_command("pool_report", stdout=out)

        payload = json.loads(out.getvalue())
        assert payload == {"total_pooled_value": "1234", "total_principal": "1234"}

    def test_single_account(self, default_ledger):
        default_ledger.update_principal("alice", 1234)
        out = StringIO()

        call_command("pool_report", "--account", "alice", stdout=out)

        payload = json.loads(out.getvalue())
        assert payload["principal"] == "1234"
        assert payload["balance"] == "1234"

    def test_unknown_account(self, default_ledger):
        with pytest.raises(CommandError):
            call_command("pool_report", "--account", "ghost", stdout=StringIO())

    def test_reconcile_flags_drift(self, default_ledger):
        default_ledger.update_principal("alice", 700)
        PoolState.objects.filter(pk=PoolState.SINGLETON_PK).update(total_principal=1)

        with pytest.raises(CommandError):
            call_command("pool_report", "--reconcile", stdout=StringIO())

    def test_unreachable_rpc_is_command_error(self, ledger, unreachable_rpc):
        ledger.update_principal("alice", 700)

        with pytest.raises(CommandError, match="OracleUnavailable"):
            call_command("pool_report", stdout=StringIO())

    def test_empty_pool_report_without_rpc(self, unreachable_rpc):
        out = StringIO()

        call_command("pool_report", stdout=out)

        assert json.loads(out.getvalue()) == {"total_pooled_value": "0", "total_principal": "0"}
