"""Shared fixtures for expense store tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from expense_store import ExpenseStore, InMemoryExpenseRepository, JSONExpenseRepository, JSONStorage


@pytest.fixture
def store() -> ExpenseStore:
    return ExpenseStore(InMemoryExpenseRepository())


@pytest.fixture
def json_repository(tmp_path: Path) -> JSONExpenseRepository:
    return JSONExpenseRepository(JSONStorage(tmp_path / "data"))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATA_DIR", "ENV", "ALLOWED_ORIGINS", "CURRENCY", "LOG_LEVEL"):
        monkeypatch.delenv(f"EXPENSE_STORE_{name}", raising=False)
