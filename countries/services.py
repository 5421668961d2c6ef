"""Read-side operations over a ``CountryStore``."""
import os

from . import utils
from .errors import NotFound


def list_countries(store, region=None, currency=None, sort=None):
    return store.filter(region=region, currency=currency, sort=sort)


def get_country(store, name):
    country = store.find_by_name(name)
    if country is None:
        raise NotFound(f"Country {name!r} not found")
    return country


def delete_country(store, name):
    if store.delete_by_name(name) == 0:
        raise NotFound(f"Country {name!r} not found")


def get_status(store):
    """Total count and the most recent refresh time (None when empty)."""
    return {
        "total_countries": store.count(),
        "last_refreshed_at": store.latest_refresh(),
    }


def get_summary_image_path():
    path = utils.get_summary_image_path()
    if not os.path.exists(path):
        raise NotFound("Summary image not found")
    return path
