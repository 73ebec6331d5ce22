import pytest

from runcontext.config import CONFIG_PATH_ENV_VAR
from runcontext.providers import reset_registry


@pytest.fixture(autouse=True)
def isolated_registry(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
    reset_registry()
    yield
    reset_registry()
