"""JSON envelope shared by every route.

All responses, success or failure, have the same shape::

    {"success": bool, "data": ..., "error": str | None, "message": str | None}

Validation failures add a ``details`` list.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Type, TypeVar

import pydantic
import structlog
from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError

logger = structlog.get_logger("rotaclock.api")

M = TypeVar("M", bound=pydantic.BaseModel)


@dataclass(frozen=True)
class ApiResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    details: Optional[list[dict[str, Any]]] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "message": self.message,
        }
        if self.details is not None:
            out["details"] = self.details
        return out


class ApiJSONProvider(DefaultJSONProvider):
    """ISO dates instead of Flask's HTTP-date rendering."""

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat(timespec="seconds")
        if isinstance(o, date):
            return o.strftime("%Y-%m-%d")
        if isinstance(o, time):
            return o.strftime("%H:%M")
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, Enum):
            return o.value
        return DefaultJSONProvider.default(o)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    return jsonify(ApiResult(success=True, data=data, message=message).to_dict()), status


def fail(error: str, status: int, *, details: Optional[list[dict[str, Any]]] = None):
    return jsonify(ApiResult(success=False, error=error, details=details).to_dict()), status


def parse_body(model: Type[M]) -> M:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    return parse_payload(model, payload)


def parse_query(model: Type[M]) -> M:
    return parse_payload(model, request.args.to_dict())


def parse_payload(model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors(include_url=False, include_context=False, include_input=False)
        ]
        raise ValidationError("Validation error", details=details)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("domain_error", error=exc.message, status=exc.status_code, kind=type(exc).__name__)
        return fail(exc.message or "Request failed", exc.status_code, details=exc.details)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled_error", error=str(exc))
        return fail("Internal server error", 500)
