import pytest

from countries.errors import StoreFailure
from countries.merge import merge
from countries.reconcile import reconcile
from tests.conftest import NOW, InMemoryCountryStore, raw


def merged(*records, rates=None, now=NOW):
    return merge(records, rates or {"TST": 2.0}, now, multiplier=lambda: 1500)


def test_creates_missing_countries(store):
    applied = reconcile(store, merged(raw("France"), raw("Spain")))

    assert applied == 2
    assert store.count() == 2


def test_updates_in_place_keeping_id(store):
    reconcile(store, merged(raw("France", population=10)))
    original = store.find_by_name("France")

    reconcile(store, merged(raw("FRANCE", population=20, region="Europe")))

    assert store.count() == 1
    updated = store.find_by_name("france")
    assert updated.id == original.id
    assert updated.name == "France"
    assert updated.population == 20
    assert updated.region == "Europe"


def test_case_variants_in_one_batch_collapse_last_write_wins(store):
    reconcile(store, merged(raw("Testland", population=1), raw("TESTLAND", population=2)))

    assert store.count() == 1
    assert store.find_by_name("testland").population == 2


def test_unmatched_currency_still_upserts(store):
    reconcile(store, merged(raw("Elsewhere", codes=("XYZ",))))

    row = store.find_by_name("elsewhere")
    assert row.currency_code == "XYZ"
    assert row.exchange_rate is None
    assert row.estimated_gdp is None


def test_update_clears_rate_when_currency_loses_its_quote(store):
    reconcile(store, merged(raw("Testland")))
    reconcile(store, merged(raw("Testland"), rates={"OTHER": 1.0}))

    row = store.find_by_name("Testland")
    assert row.exchange_rate is None
    assert row.estimated_gdp is None


def test_countries_missing_from_batch_are_left_alone(store):
    reconcile(store, merged(raw("Old"), raw("Kept")))
    later = NOW.replace(hour=13)

    reconcile(store, merged(raw("Kept"), now=later))

    assert store.count() == 2
    assert store.find_by_name("Old").last_refreshed_at == NOW
    assert store.find_by_name("Kept").last_refreshed_at == later


def test_store_failure_keeps_prefix_and_reports_applied():
    store = InMemoryCountryStore(fail_on="Charlie")

    with pytest.raises(StoreFailure) as excinfo:
        reconcile(store, merged(raw("Alpha"), raw("Bravo"), raw("Charlie"), raw("Delta")))

    assert excinfo.value.applied == 2
    assert store.count() == 2
    assert store.find_by_name("alpha") is not None
    assert store.find_by_name("bravo") is not None
    assert store.find_by_name("delta") is None
