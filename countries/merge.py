"""
Join decoded countries with exchange rates.

``merge`` is pure: the clock value and the GDP multiplier source are both
passed in, so the join can be checked with a fixed multiplier.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from . import utils

MUTABLE_FIELDS = (
    "capital", "region", "population", "currency_code",
    "exchange_rate", "estimated_gdp", "flag_url", "last_refreshed_at",
)


@dataclass(frozen=True)
class MergedCountry:
    name: str
    capital: str
    region: str
    population: int
    currency_code: str
    exchange_rate: Optional[float]
    estimated_gdp: Optional[float]
    flag_url: str
    last_refreshed_at: datetime

    def mutable_fields(self):
        """Everything a refresh may overwrite on an existing country."""
        return {name: getattr(self, name) for name in MUTABLE_FIELDS}


def pick_currency(record):
    """First listed currency code, or "" when the country lists none."""
    if record.currency_codes:
        return record.currency_codes[0] or ""
    return ""


def merge_one(record, rates, now, multiplier=utils.make_multiplier):
    currency_code = pick_currency(record)
    exchange_rate = None
    estimated_gdp = None

    rate = rates.get(currency_code) if currency_code else None
    if rate is not None and rate > 0:
        exchange_rate = float(rate)
        estimated_gdp = record.population * multiplier() / exchange_rate

    return MergedCountry(
        name=record.name,
        capital=record.capital,
        region=record.region,
        population=record.population,
        currency_code=currency_code,
        exchange_rate=exchange_rate,
        estimated_gdp=estimated_gdp,
        flag_url=record.flag,
        last_refreshed_at=now,
    )


def merge(countries, rates, now, multiplier=utils.make_multiplier):
    """
    Build one ``MergedCountry`` per raw country.

    A currency without a quoted rate is not an error: the record keeps its
    code and leaves both exchange_rate and estimated_gdp unset.
    """
    return [merge_one(record, rates, now, multiplier) for record in countries]
