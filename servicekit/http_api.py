"""The versioned HTTP API: translation, key-value store, shipper location, VietQR and billing."""

from __future__ import annotations

import os
from typing import Any, Callable, TypeVar

from flask import Flask, Response, jsonify, request

from servicekit.schemas import (
    GenerateInvoicePDFRequest,
    GenerateQRRequest,
    RedisValueRequest,
    ShipperLocationRequest,
    TranslateRequest,
    UpdateVietQRStatusRequest,
    ValidationError,
    error_body,
    invoice_body,
    redis_value_body,
    success_body,
)
from servicekit.entity import Translation

INVALID_BODY = "invalid request body"
INTERNAL_ERROR = "internal server error"

_Schema = TypeVar("_Schema")


class _BadRequest(Exception):
    """A request body failed to parse or validate."""


def _error(status: int, message: str) -> tuple[Response, int]:
    return jsonify(error_body(message)), status


def _parse(schema: Callable[[Any], _Schema]) -> _Schema:
    try:
        return schema(request.get_json(silent=True))
    except ValidationError as exc:
        raise _BadRequest(str(exc)) from exc


def create_app(
    translation: Any = None,
    redis: Any = None,
    vietqr: Any = None,
    billing: Any = None,
    logger: Any = None,
    shipper_location: Any = None,
    output_dir: str = ".",
) -> Flask:
    """Build the Flask application with a route group for every use case given.

    Invoice PDFs are written into output_dir as invoice_<number>.pdf.
    """
    app = Flask("servicekit")

    def log_error(err: Any, where: str) -> None:
        if logger is not None:
            logger.error(err, where)

    @app.errorhandler(_BadRequest)
    def bad_request(exc: _BadRequest) -> tuple[Response, int]:
        log_error(exc, "http - v1 - request body")
        return _error(400, INVALID_BODY)

    @app.get("/healthz")
    def healthz() -> tuple[str, int]:
        return "", 200

    if translation is not None:

        @app.get("/v1/translation/history")
        def history() -> Any:
            try:
                result = translation.history()
            except Exception as exc:
                log_error(exc, "http - v1 - history")
                return _error(500, "database problems")
            return jsonify(result.to_dict())

        @app.post("/v1/translation/do-translate")
        def do_translate() -> Any:
            body = _parse(TranslateRequest.from_json)
            try:
                result = translation.translate(
                    Translation(
                        source=body.source,
                        destination=body.destination,
                        original=body.original,
                    )
                )
            except Exception as exc:
                log_error(exc, "http - v1 - doTranslate")
                return _error(500, "translation service problems")
            return jsonify(result.to_dict())

    if redis is not None:

        @app.post("/v1/redis/set")
        def set_value() -> Any:
            body = _parse(RedisValueRequest.from_json)
            try:
                redis.set_value(body.to_entity())
            except Exception as exc:
                log_error(exc, "http - v1 - setValue - r.r.SetValue")
                return _error(500, INTERNAL_ERROR)
            return jsonify(success_body("success"))

        @app.get("/v1/redis/get/<key>")
        def get_value(key: str) -> Any:
            try:
                value = redis.get_value(key)
            except Exception as exc:
                log_error(exc, "http - v1 - getValue - r.r.GetValue")
                return _error(500, INTERNAL_ERROR)
            return jsonify(redis_value_body(value))

    if shipper_location is not None:

        @app.post("/v1/redis/shipper/location")
        def update_shipper_location() -> Any:
            body = _parse(ShipperLocationRequest.from_json)
            try:
                shipper_location.update_location(body.to_entity())
            except Exception as exc:
                log_error(exc, "http - v1 - UpdateShipperLocation - usecase.UpdateLocation")
                return _error(500, INTERNAL_ERROR)
            return jsonify(success_body("shipper location updated"))

        @app.get("/v1/redis/shipper/location/<shipper_id>")
        def get_shipper_location(shipper_id: str) -> Any:
            if not shipper_id:
                return _error(400, "shipper_id is required")
            try:
                loc = shipper_location.get_location(shipper_id)
            except Exception as exc:
                log_error(exc, "http - v1 - GetShipperLocation - usecase.GetLocation")
                return _error(500, INTERNAL_ERROR)
            return jsonify(loc.to_dict())

    if vietqr is not None:

        @app.post("/v1/vietqr/gen")
        def generate_qr() -> Any:
            body = _parse(GenerateQRRequest.from_json)
            try:
                qr = vietqr.generate_qr(body.to_entity())
            except Exception as exc:
                log_error(exc, "http - v1 - generateQR - v1.vietqr.GenerateQR")
                return _error(500, INTERNAL_ERROR)
            return jsonify(qr.to_dict())

        @app.get("/v1/vietqr/inquiry/<qr_id>")
        def inquiry_qr(qr_id: str) -> Any:
            try:
                qr = vietqr.inquiry_qr(qr_id)
            except Exception as exc:
                log_error(exc, "http - v1 - inquiryQR - v1.vietqr.InquiryQR")
                return _error(500, INTERNAL_ERROR)
            return jsonify(qr.to_dict())

        @app.put("/v1/vietqr/update/<qr_id>")
        def update_status(qr_id: str) -> Any:
            body = _parse(UpdateVietQRStatusRequest.from_json)
            try:
                status = body.to_status()
            except ValidationError:
                return _error(400, "invalid status")
            try:
                vietqr.update_status(qr_id, status)
            except Exception as exc:
                log_error(exc, "http - v1 - updateStatus - v1.vietqr.UpdateStatus")
                return _error(500, INTERNAL_ERROR)
            return jsonify({"status": "ok"})

    if billing is not None:

        @app.post("/v1/billing/invoice")
        def generate_invoice_pdf() -> Any:
            body = _parse(GenerateInvoicePDFRequest.from_json)
            data = body.to_invoice_data()
            output_path = os.path.normpath(
                os.path.join(output_dir, f"invoice_{data.number}.pdf")
            )
            try:
                billing.generate_invoice_pdf(data, output_path)
            except Exception as exc:
                log_error(exc, "http - v1 - GenerateInvoicePDF")
                return _error(500, "failed to generate PDF")
            return jsonify(invoice_body(output_path))

    return app