"""Flask REST API exposing the household ledger services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from kakeibo.exceptions import RecordNotFoundError, ValidationError
from kakeibo.services import CategoryService, LedgerService, TransactionService
from kakeibo.storage import JSONStorage
from kakeibo.validators import validate_date, validate_year_month


def create_app(data_dir: Optional[Path] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("KAKEIBO_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("KAKEIBO_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    storage = JSONStorage(Path(data_dir or os.getenv("KAKEIBO_DATA_DIR", "data")))
    category_service = CategoryService(storage)
    transaction_service = TransactionService(storage)
    ledger = LedgerService(transaction_service, category_service)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str, field: Optional[str] = None):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc), "field": field}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error", exc.field)

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _requested_month() -> Tuple[int, int]:
        return validate_year_month(request.args.get("year"), request.args.get("month"))

    @app.get("/categories")
    def list_categories():
        categories = category_service.list(request.args.get("type") or None)
        return _success({"items": [category.to_dict() for category in categories]})

    @app.post("/categories")
    def create_category():
        payload = _json_body()
        category = category_service.add(payload.get("name"), payload.get("type"))
        return _success(category.to_dict(), 201)

    @app.delete("/categories/<category_id>")
    def delete_category(category_id: str):
        category_service.remove(category_id)
        return _success({}, 204)

    @app.get("/transactions")
    def list_transactions():
        if request.args.get("date"):
            day = validate_date(request.args["date"], "date")
            records = transaction_service.for_day(day)
        elif request.args.get("year") or request.args.get("month"):
            records = transaction_service.list(*_requested_month())
        else:
            records = transaction_service.list()
        return _success({"items": ledger.describe(records)})

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        transaction = transaction_service.add(payload)
        return _success(transaction.to_dict(), 201)

    @app.get("/transactions/<transaction_id>")
    def get_transaction(transaction_id: str):
        transaction = transaction_service.get(transaction_id)
        return _success(ledger.describe([transaction])[0])

    @app.delete("/transactions/<transaction_id>")
    def delete_transaction(transaction_id: str):
        transaction_service.remove(transaction_id)
        return _success({}, 204)

    @app.get("/summary")
    def summary():
        return _success(ledger.summary(*_requested_month()).to_dict())

    @app.get("/calendar")
    def calendar():
        return _success(ledger.month_view(*_requested_month()))

    return app
