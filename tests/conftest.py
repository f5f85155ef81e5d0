import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ('NOXE_DIR', 'NOXE_TYPE', 'NOXE_AUTHOR', 'NOXE_TEMPLATE', 'VISUAL', 'EDITOR'):
        monkeypatch.delenv(var, raising=False)
