"""Tests for the console adapter."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from expense_store import ExpenseStore, JSONExpenseRepository, JSONStorage
from expense_store_cli.cli import main


def _run(data_dir: Path, *argv: str) -> int:
    return main(["--data-dir", str(data_dir), *argv])


def _stored_names(data_dir: Path) -> List[str]:
    store = ExpenseStore(JSONExpenseRepository(JSONStorage(data_dir)))
    return [expense.name for expense in store.list()]


def test_add_and_list_in_date_order(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "add", "Coffee", "2024-01-05", "3.50") == 0
    assert _run(tmp_path, "add", "Rent", "2024-01-01", "900.00") == 0
    capsys.readouterr()

    assert _run(tmp_path, "list") == 0
    out = capsys.readouterr().out

    assert "2 expenses (total GBP 903.50)" in out
    assert out.index("Rent") < out.index("Coffee")
    assert "Jan 05  Coffee  GBP 3.50" in out


def test_list_empty_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "list") == 0
    assert "No expenses yet." in capsys.readouterr().out


def test_currency_comes_from_environment(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("EXPENSE_STORE_CURRENCY", "eur")
    _run(tmp_path, "add", "Coffee", "2024-01-05", "3.5")

    assert "EUR 3.50" in capsys.readouterr().out


def test_edit_and_delete_by_id(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, "add", "Coffee", "2024-01-05", "3.50")
    store = ExpenseStore(JSONExpenseRepository(JSONStorage(tmp_path)))
    expense_id = store.list()[0].id

    assert _run(tmp_path, "edit", expense_id, "--value", "4.00") == 0
    assert "GBP 4.00" in capsys.readouterr().out

    assert _run(tmp_path, "delete", expense_id) == 0
    assert f"Expense {expense_id} deleted." in capsys.readouterr().out
    assert _run(tmp_path, "delete", expense_id) == 1
    assert "not found" in capsys.readouterr().err


def test_delete_by_position_and_many(tmp_path: Path) -> None:
    for name, day in [("a", "01"), ("b", "02"), ("c", "03"), ("d", "04")]:
        _run(tmp_path, "add", name, f"2024-01-{day}", "1")

    assert _run(tmp_path, "delete", "--position", "0") == 0
    assert _stored_names(tmp_path) == ["b", "c", "d"]

    assert _run(tmp_path, "delete-many", "0", "2") == 0
    assert _stored_names(tmp_path) == ["c"]


def test_invalid_input_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "add", "  ", "2024-01-05", "3.50") == 1
    assert "Validation error" in capsys.readouterr().err
    assert _run(tmp_path, "add", "Big", "2024-01-05", "1e1000000") == 1
    assert "outside the supported range" in capsys.readouterr().err
    assert _stored_names(tmp_path) == []


def test_delete_requires_exactly_one_target(tmp_path: Path) -> None:
    _run(tmp_path, "add", "Rent", "2024-01-01", "900.00")
    _run(tmp_path, "add", "Coffee", "2024-01-05", "3.50")
    store = ExpenseStore(JSONExpenseRepository(JSONStorage(tmp_path)))
    coffee_id = store.list()[1].id

    with pytest.raises(SystemExit) as both:
        _run(tmp_path, "delete", coffee_id, "--position", "0")
    assert both.value.code != 0
    with pytest.raises(SystemExit) as neither:
        _run(tmp_path, "delete")
    assert neither.value.code != 0

    assert _stored_names(tmp_path) == ["Rent", "Coffee"]


def test_data_dir_that_is_a_file_reports_storage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    data_file = tmp_path / "not-a-dir"
    data_file.write_text("", encoding="utf-8")

    assert _run(data_file, "list") == 1
    assert "Storage error" in capsys.readouterr().err


def test_argument_parser_rejects_bad_date(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        _run(tmp_path, "add", "Coffee", "05/01/2024", "3.50")


def test_total(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, "add", "Refund", "2024-01-01", "-10")
    _run(tmp_path, "add", "Rent", "2024-01-02", "900")
    capsys.readouterr()

    assert _run(tmp_path, "total") == 0
    assert "Total: GBP 890.00" in capsys.readouterr().out
