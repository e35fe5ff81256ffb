"""Shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ('CLICKHOUSE_USER', 'CLICKHOUSE_PASSWORD', 'CHDIG_URL'):
        monkeypatch.delenv(name, raising=False)
