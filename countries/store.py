"""
Country storage behind a small interface.

The refresh pipeline and the read endpoints only talk to a ``CountryStore``;
``DjangoCountryStore`` is the ORM-backed one used by the app. Each method is
a single query or a single save, nothing here opens a transaction.
"""
import functools
import logging
from abc import ABC, abstractmethod

from django.db import DatabaseError
from django.db.models import F, Max

from .errors import StoreFailure
from .models import Country, name_key_for

logger = logging.getLogger(__name__)


class CountryStore(ABC):
    """Name-keyed country storage. Name matching is case-insensitive."""

    @abstractmethod
    def find_by_name(self, name):
        """Return the stored country or None."""
        ...

    @abstractmethod
    def create(self, record):
        ...

    @abstractmethod
    def update(self, country, record):
        """Overwrite the mutable fields of ``country`` from ``record``."""
        ...

    @abstractmethod
    def count(self):
        ...

    @abstractmethod
    def top_by_gdp(self, limit=5):
        """Countries with a GDP estimate, highest first."""
        ...

    @abstractmethod
    def filter(self, region=None, currency=None, sort=None):
        ...

    @abstractmethod
    def delete_by_name(self, name):
        """Delete matching countries and return how many were removed."""
        ...

    @abstractmethod
    def latest_refresh(self):
        ...


def _wrap_db_errors(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("Store operation %s failed: %s", method.__name__, exc)
            raise StoreFailure(f"Database error: {exc}") from exc
    return wrapper


class DjangoCountryStore(CountryStore):

    @_wrap_db_errors
    def find_by_name(self, name):
        return Country.objects.filter(name_key=name_key_for(name)).first()

    @_wrap_db_errors
    def create(self, record):
        return Country.objects.create(name=record.name, **record.mutable_fields())

    @_wrap_db_errors
    def update(self, country, record):
        fields = record.mutable_fields()
        for attr, value in fields.items():
            setattr(country, attr, value)
        country.save(update_fields=list(fields))
        return country

    @_wrap_db_errors
    def count(self):
        return Country.objects.count()

    @_wrap_db_errors
    def top_by_gdp(self, limit=5):
        qs = Country.objects.filter(estimated_gdp__isnull=False).order_by("-estimated_gdp", "id")
        return list(qs[:limit])

    @_wrap_db_errors
    def filter(self, region=None, currency=None, sort=None):
        qs = Country.objects.all()
        if region:
            qs = qs.filter(region=region)
        if currency:
            qs = qs.filter(currency_code=currency)
        if sort == "gdp_desc":
            qs = qs.order_by(F("estimated_gdp").desc(nulls_last=True), "id")
        else:
            qs = qs.order_by("id")
        return list(qs)

    @_wrap_db_errors
    def delete_by_name(self, name):
        deleted, _ = Country.objects.filter(name_key=name_key_for(name)).delete()
        return deleted

    @_wrap_db_errors
    def latest_refresh(self):
        return Country.objects.aggregate(latest=Max("last_refreshed_at"))["latest"]
