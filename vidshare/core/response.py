from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Optional, Sequence
from uuid import uuid4

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


DataPayload = Optional[object]

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_id(trace_id: str) -> Token[Optional[str]]:
    return _request_id_ctx.set(trace_id)


def reset_request_id(token: Token[Optional[str]]) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str:
    trace_id = _request_id_ctx.get()
    if trace_id:
        return trace_id
    return uuid4().hex


def success(
    data: DataPayload = None, message: str = "Success", status_code: int = 200
) -> JSONResponse:
    if status_code >= 400:
        raise ValueError(f"success envelope requires status < 400, got {status_code}")
    return JSONResponse(
        {
            "statusCode": status_code,
            "data": jsonable_encoder(data),
            "message": message,
            "success": True,
        },
        status_code=status_code,
    )


def error(
    status_code: int, message: str, errors: Optional[Sequence[str]] = None
) -> JSONResponse:
    if status_code < 400:
        raise ValueError(f"error envelope requires status >= 400, got {status_code}")
    return JSONResponse(
        {
            "statusCode": status_code,
            "message": message,
            "errors": list(errors or []),
            "data": None,
            "success": False,
        },
        status_code=status_code,
        headers={"X-Request-Id": get_request_id()},
    )
