import importlib

import dotenv

from country_currency import settings as project_settings


def test_settings_load_dotenv_from_project_root(monkeypatch):
    calls = []
    monkeypatch.setattr(dotenv, "load_dotenv", lambda path: calls.append(path))

    importlib.reload(project_settings)

    assert calls == [project_settings.BASE_DIR / ".env"]


def test_env_bool_reads_common_spellings(monkeypatch):
    monkeypatch.setenv("FLAG_ON", "Yes")
    monkeypatch.setenv("FLAG_OFF", "0")
    monkeypatch.delenv("FLAG_MISSING", raising=False)

    assert project_settings.env_bool("FLAG_ON") is True
    assert project_settings.env_bool("FLAG_OFF") is False
    assert project_settings.env_bool("FLAG_MISSING", default=True) is True
