import io

import pytest
import requests
from django.core.management import CommandError, call_command

from countries import sources
from countries.models import Country
from tests.conftest import FakeResponse

pytestmark = pytest.mark.django_db


def test_refresh_command_loads_countries(monkeypatch, settings):
    payloads = {
        settings.COUNTRIES_API_URL: [{"name": "Testland", "population": 1000, "currencies": [{"code": "TST"}]}],
        settings.EXCHANGE_API_URL: {"rates": {"TST": 2.0}},
    }
    monkeypatch.setattr(sources.requests, "get", lambda url, timeout=None: FakeResponse(payloads[url]))
    out = io.StringIO()

    call_command("refresh_countries", stdout=out)

    assert "Refreshed 1 countries" in out.getvalue()
    assert Country.objects.get(name__iexact="testland").currency_code == "TST"


def test_refresh_command_fails_on_unreachable_source(monkeypatch):
    def refuse(url, timeout=None):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(sources.requests, "get", refuse)

    with pytest.raises(CommandError):
        call_command("refresh_countries", stdout=io.StringIO())
    assert Country.objects.count() == 0
