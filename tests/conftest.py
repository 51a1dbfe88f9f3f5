import pytest

from pemdas.config import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PEMDAS_* settings from the caller's environment out of tests."""
    for key in ("CONFIG", "STRICT", "DOMAIN", "PRECISION", "LOG_LEVEL"):
        monkeypatch.delenv(f"{ENV_PREFIX}{key}", raising=False)
