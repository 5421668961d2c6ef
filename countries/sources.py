"""
Adapters for the two upstream APIs.

Each fetch performs a single GET with no retry. Transport problems
(connection errors, non-2xx answers) raise ``SourceUnavailable``;
bodies that do not decode into the expected shape raise ``DecodeFailed``.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import requests
from django.conf import settings
from requests.exceptions import RequestException

from .errors import DecodeFailed, SourceUnavailable
from .serializers import ExchangeRatesSerializer, RawCountrySerializer

logger = logging.getLogger(__name__)

COUNTRIES_SOURCE = "Countries API"
EXCHANGE_SOURCE = "Exchange Rates API"


@dataclass(frozen=True)
class RawCountry:
    name: str
    capital: str = ""
    region: str = ""
    population: int = 0
    flag: str = ""
    currency_codes: Tuple[str, ...] = ()


@dataclass
class CountryBatch:
    """Decoded countries plus the entries that were rejected on the way."""
    records: List[RawCountry] = field(default_factory=list)
    rejected: List[dict] = field(default_factory=list)

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)


def _get_json(url, source):
    try:
        resp = requests.get(url, timeout=settings.COUNTRIES_HTTP_TIMEOUT)
        resp.raise_for_status()
    except RequestException as exc:
        logger.warning("%s request failed: %s", source, exc)
        raise SourceUnavailable(source, str(exc)) from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise DecodeFailed(source, "response is not valid JSON") from exc


def decode_countries(payload):
    """Turn the countries payload into a ``CountryBatch``."""
    if not isinstance(payload, list):
        raise DecodeFailed(COUNTRIES_SOURCE, "expected a JSON array")

    batch = CountryBatch()
    for item in payload:
        serializer = RawCountrySerializer(data=item)
        if not serializer.is_valid():
            name = item.get("name") if isinstance(item, dict) else None
            batch.rejected.append({"name": name, "details": serializer.errors})
            continue
        data = serializer.validated_data
        batch.records.append(RawCountry(
            name=data["name"],
            capital=data["capital"],
            region=data["region"],
            population=data["population"],
            flag=data["flag"],
            currency_codes=tuple(data["currencies"]),
        ))
    if batch.rejected:
        logger.info("Skipped %d invalid country entries", len(batch.rejected))
    return batch


def decode_exchange_rates(payload):
    """Return the ``{code: rate}`` mapping, keeping only positive rates."""
    if not isinstance(payload, dict):
        raise DecodeFailed(EXCHANGE_SOURCE, "expected a JSON object")
    serializer = ExchangeRatesSerializer(data=payload)
    if not serializer.is_valid():
        raise DecodeFailed(EXCHANGE_SOURCE, str(serializer.errors))
    rates = serializer.validated_data["rates"]
    return {code: rate for code, rate in rates.items() if rate > 0}


def fetch_countries():
    return decode_countries(_get_json(settings.COUNTRIES_API_URL, COUNTRIES_SOURCE))


def fetch_exchange_rates():
    return decode_exchange_rates(_get_json(settings.EXCHANGE_API_URL, EXCHANGE_SOURCE))
