"""HTTP response helpers for Lambda proxy integrations."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from lamb.errors import ERR_INTERNAL_SERVER, Err

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "Content-Type": "application/json",
}


class Response(BaseModel):
    """Response handed back to API Gateway."""

    status_code: int = 0
    headers: dict[str, str] | None = None
    body: str = ""

    def to_proxy(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers or {}),
            "body": self.body,
        }


def _default(value: Any) -> Any:
    if isinstance(value, Err):
        return value.body()
    return to_jsonable_python(value)


def encode(body: Any) -> str:
    """Encode ``body`` as strict JSON. Raises ``TypeError``/``ValueError``."""

    return json.dumps(body, default=_default, allow_nan=False)


def build(status_code: int, body: Any) -> Response:
    """Return a response for ``body``, or a 500 if it cannot be encoded."""

    if body is None:
        return Response(status_code=status_code)

    try:
        payload = encode(body)
    except (TypeError, ValueError, RecursionError):
        logger.warning(
            "Response body of type %s is not JSON encodable", type(body).__name__
        )
        status_code = ERR_INTERNAL_SERVER.status
        payload = encode(ERR_INTERNAL_SERVER)

    return Response(
        status_code=status_code, headers=dict(_DEFAULT_HEADERS), body=payload
    )


def ok(body: Any) -> Response:
    return build(200, body)


def created() -> Response:
    return build(201, None)


def json_response(
    payload: Any,
    *,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return a JSON response compatible with API Gateway Lambda proxy."""

    response = build(status_code, payload)
    if headers:
        response.headers = {**(response.headers or {}), **headers}
    return response.to_proxy()


def error_response(err: Err) -> dict[str, Any]:
    """Return the proxy response for ``err``."""

    return json_response(err, status_code=err.status)
