"""Flask REST API exposing the expense store."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from expense_store.config import Settings
from expense_store.exceptions import InvalidInputError, NotFoundError, PersistenceError
from expense_store.logging_utils import configure_root_logger
from expense_store.models import format_value
from expense_store.services import ExpenseStore
from expense_store.storage import JSONExpenseRepository, JSONStorage


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()
    configure_root_logger(settings.log_level)

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": list(settings.allowed_origins)}}, supports_credentials=True)
    else:
        CORS(app)

    storage = JSONStorage(Path(data_dir or settings.data_dir))
    store = ExpenseStore(JSONExpenseRepository(storage))
    app.extensions["expense_store"] = store

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(exc: InvalidInputError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc: NotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise InvalidInputError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidInputError("Malformed JSON body")
        return data

    @app.get("/expenses")
    def list_expenses():
        expenses = store.list()
        return _success({
            "items": [expense.to_dict() for expense in expenses],
            "total": format_value(store.total()),
        })

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = store.add(payload.get("name"), payload.get("date"), payload.get("value"))
        return _success(expense.to_dict(), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        expense = store.get(expense_id)
        return _success(expense.to_dict())

    @app.patch("/expenses/<expense_id>")
    def update_expense(expense_id: str):
        payload = _json_body()
        expense = store.update(expense_id, payload)
        return _success(expense.to_dict())

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        store.delete(expense_id)
        return _success({}, 204)

    @app.delete("/expenses/positions/<int:position>")
    def delete_expense_at(position: int):
        store.delete(position)
        return _success({}, 204)

    @app.post("/expenses/delete-positions")
    def delete_expenses_at():
        positions = _json_body().get("positions")
        if not isinstance(positions, list):
            raise InvalidInputError("positions must be a list of integers")
        removed = store.delete_many(positions)
        return _success({"deleted": [expense.id for expense in removed]})

    return app
