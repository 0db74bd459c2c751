"""
Pytest configuration and fixtures for the supply ledger tests.
"""
import pytest

from supply_ledger.apps.pool.fixed_point import BASE_INDEX_SCALE
from supply_ledger.apps.pool.services.accrual import AccrualEngine
from supply_ledger.apps.pool.services.ledger import PrincipalLedger, default_engine
from supply_ledger.apps.rates.oracle import StaticIndexOracle

ANCHOR = 1_700_000_000


@pytest.fixture
def oracle():
    """Rate source pinned at the identity index with the clock on its anchor."""
    return StaticIndexOracle(
        base_supply_index=BASE_INDEX_SCALE,
        tracking_supply_index=0,
        last_accrual_time=ANCHOR,
        now=ANCHOR,
    )


@pytest.fixture
def engine(oracle):
    return AccrualEngine(oracle)


@pytest.fixture
def ledger(engine):
    return PrincipalLedger(engine)


@pytest.fixture
def default_ledger(monkeypatch, ledger):
    """Route every get_default_ledger() lookup to the in-memory oracle ledger."""
    for target in (
        "supply_ledger.apps.pool.tasks.get_default_ledger",
        "supply_ledger.apps.pool.views.get_default_ledger",
        "supply_ledger.apps.pool.management.commands.pool_report.get_default_ledger",
    ):
        monkeypatch.setattr(target, lambda: ledger)
    return ledger


@pytest.fixture
def unreachable_rpc(settings):
    """Point the default ledger at a closed port, with a cold engine cache."""
    settings.WEB3_PROVIDER_URL = "http://127.0.0.1:9"
    settings.WEB3_REQUEST_TIMEOUT = 2
    default_engine.cache_clear()
    yield
    default_engine.cache_clear()
