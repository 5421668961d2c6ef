import itertools
from datetime import datetime, timezone

import pytest
import requests

from countries.errors import StoreFailure
from countries.sources import RawCountry
from countries.store import CountryStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeCountry:
    def __init__(self, id, name, **fields):
        self.id = id
        self.name = name
        for attr, value in fields.items():
            setattr(self, attr, value)


class InMemoryCountryStore(CountryStore):
    """
    Dict-backed store for pipeline tests.

    ``fail_on`` names a country whose lookup raises ``StoreFailure``.
    """

    def __init__(self, fail_on=None):
        self.rows = {}
        self.fail_on = fail_on
        self._ids = itertools.count(1)

    def find_by_name(self, name):
        if self.fail_on and name.casefold() == self.fail_on.casefold():
            raise StoreFailure("storage unavailable")
        for row in self.rows.values():
            if row.name.casefold() == name.casefold():
                return row
        return None

    def create(self, record):
        row = FakeCountry(next(self._ids), record.name, **record.mutable_fields())
        self.rows[row.id] = row
        return row

    def update(self, country, record):
        for attr, value in record.mutable_fields().items():
            setattr(country, attr, value)
        return country

    def count(self):
        return len(self.rows)

    def top_by_gdp(self, limit=5):
        rows = [r for r in self.rows.values() if r.estimated_gdp is not None]
        return sorted(rows, key=lambda r: -r.estimated_gdp)[:limit]

    def filter(self, region=None, currency=None, sort=None):
        rows = [
            r for r in sorted(self.rows.values(), key=lambda r: r.id)
            if (not region or r.region == region) and (not currency or r.currency_code == currency)
        ]
        if sort == "gdp_desc":
            rows.sort(key=lambda r: (r.estimated_gdp is None, -(r.estimated_gdp or 0)))
        return rows

    def delete_by_name(self, name):
        doomed = [k for k, r in self.rows.items() if r.name.casefold() == name.casefold()]
        for key in doomed:
            del self.rows[key]
        return len(doomed)

    def latest_refresh(self):
        stamps = [r.last_refreshed_at for r in self.rows.values() if r.last_refreshed_at]
        return max(stamps) if stamps else None


class FakeResponse:
    def __init__(self, payload=None, status_code=200, body_error=None):
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.body_error:
            raise self.body_error
        return self.payload


def raw(name, population=1000, codes=("TST",), region="Testregion", capital="Testville"):
    return RawCountry(
        name=name,
        capital=capital,
        region=region,
        population=population,
        flag=f"https://flags.example/{name.lower()}.svg",
        currency_codes=tuple(codes),
    )


@pytest.fixture
def store():
    return InMemoryCountryStore()


@pytest.fixture(autouse=True)
def cache_dir(settings, tmp_path):
    path = tmp_path / "cache"
    settings.COUNTRIES_CACHE_DIR = str(path)
    return path
