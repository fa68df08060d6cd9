import pytest
from pytest import MonkeyPatch

from permaqr.constants import ENV


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: MonkeyPatch) -> None:
    """Keep developer/CI environment variables from leaking into tests."""
    for group in (ENV.App, ENV.AppConfig):
        for name in group:
            monkeypatch.delenv(name, raising=False)
