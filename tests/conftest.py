import itertools

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the app config at an empty temp file for every test."""
    path = tmp_path / "config.json"
    monkeypatch.setenv("FINANCE_TRACKER_CONFIG", str(path))
    return path


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"tx-{next(counter)}"
