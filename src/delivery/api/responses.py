"""Response envelope shared by every endpoint.

Success: ``{"success": true, "data": ..., "timestamp": ...}``
Error:   ``{"success": false, "data": {"message", "errorCode", "details"?}, "timestamp": ...}``

A payload that already is an envelope is returned as-is, so nothing is ever
wrapped twice.
"""

from datetime import UTC, datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from delivery.shared.errors import DeliveryError

_ENVELOPE_KEYS = {"success", "data", "timestamp"}


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def is_envelope(payload: Any) -> bool:
    return isinstance(payload, dict) and _ENVELOPE_KEYS <= payload.keys()


def envelope(payload: Any) -> dict:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    if is_envelope(payload):
        return payload
    return {"success": True, "data": jsonable_encoder(payload), "timestamp": _timestamp()}


def success(payload: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=envelope(payload), status_code=status_code)


def failure(error: DeliveryError) -> JSONResponse:
    data = {"message": error.message, "errorCode": error.code}
    if error.details is not None:
        data["details"] = jsonable_encoder(error.details)
    return JSONResponse(
        content={"success": False, "data": data, "timestamp": _timestamp()},
        status_code=error.kind.status_code,
    )
