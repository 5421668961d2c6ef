"""
Refresh pipeline: fetch both sources, merge, upsert, redraw the summary.

A failed fetch aborts before anything is written. A store failure aborts
the upsert loop but keeps the rows already written. The summary image is
best-effort: if it fails the refresh still counts as successful.
"""
import enum
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from . import sources, summary, utils
from .errors import DecodeFailed, SourceUnavailable, StoreFailure
from .merge import merge
from .reconcile import reconcile
from .store import DjangoCountryStore

logger = logging.getLogger(__name__)


class RefreshState(enum.Enum):
    IDLE = "idle"
    FETCHING_COUNTRIES = "fetching_countries"
    FETCHING_RATES = "fetching_rates"
    MERGING = "merging"
    RECONCILING = "reconciling"
    NOTIFYING_DOWNSTREAM = "notifying_downstream"


@dataclass
class RefreshResult:
    refreshed_at: datetime
    applied: int
    image_generated: bool
    duration_seconds: float
    errors: List[dict] = field(default_factory=list)


class RefreshOrchestrator:
    """
    Runs one refresh per ``run()`` call.

    Every collaborator is injectable so tests can swap in fakes:
    ``fetch_countries`` returns an iterable of raw countries (optionally with a
    ``rejected`` list), ``fetch_rates`` returns a ``{code: rate}`` mapping,
    ``notify`` is called with ``(store, now)`` once the upsert has finished.
    """

    def __init__(self, store, fetch_countries=sources.fetch_countries,
                 fetch_rates=sources.fetch_exchange_rates, notify=summary.render_summary,
                 clock=utils.get_now, multiplier=utils.make_multiplier):
        self.store = store
        self.fetch_countries = fetch_countries
        self.fetch_rates = fetch_rates
        self.notify = notify
        self.clock = clock
        self.multiplier = multiplier
        self.state = RefreshState.IDLE

    def run(self):
        start_time = time.monotonic()
        logger.info("Refresh started")
        try:
            countries, rates = self._fetch()

            now = self.clock()
            self.state = RefreshState.MERGING
            merged = merge(countries, rates, now, self.multiplier)

            self.state = RefreshState.RECONCILING
            try:
                applied = reconcile(self.store, merged)
            except StoreFailure as exc:
                logger.error("Refresh aborted after %d of %d countries: %s",
                             exc.applied, len(merged), exc)
                raise

            self.state = RefreshState.NOTIFYING_DOWNSTREAM
            image_generated = self._notify(now)
        finally:
            self.state = RefreshState.IDLE

        duration = round(time.monotonic() - start_time, 2)
        logger.info("Refreshed %d countries in %ss", applied, duration)
        return RefreshResult(
            refreshed_at=now,
            applied=applied,
            image_generated=image_generated,
            duration_seconds=duration,
            errors=list(getattr(countries, "rejected", [])),
        )

    def _fetch(self):
        try:
            self.state = RefreshState.FETCHING_COUNTRIES
            countries = self.fetch_countries()
            self.state = RefreshState.FETCHING_RATES
            rates = self.fetch_rates()
        except (SourceUnavailable, DecodeFailed) as exc:
            logger.warning("Refresh aborted while %s: %s", self.state.value, exc)
            raise
        return countries, rates

    def _notify(self, now):
        try:
            self.notify(self.store, now)
        except Exception:
            logger.exception("Summary image generation failed")
            return False
        return True


def refresh_countries(store=None):
    """Run a refresh against the database-backed store."""
    return RefreshOrchestrator(store or DjangoCountryStore()).run()
