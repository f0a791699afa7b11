"""Error types returned to API consumers and the classifier for everything else."""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

logger = logging.getLogger(__name__)


class Err(Exception):
    """Error whose code and detail are safe to show to the caller.

    ``status`` travels in the response envelope, never in the body.
    """

    def __init__(
        self, status: int, code: str, detail: str, params: Any | None = None
    ) -> None:
        super().__init__(status, code, detail, params)

    @property
    def status(self) -> int:
        return self.args[0]

    @property
    def code(self) -> str:
        return self.args[1]

    @property
    def detail(self) -> str:
        return self.args[2]

    @property
    def params(self) -> Any | None:
        return self.args[3]

    def body(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "detail": self.detail}
        if self.params is not None:
            payload["params"] = self.params
        return payload

    def __str__(self) -> str:
        return f"Code: {self.code}; Status: {self.status}; Detail: {self.detail}"

    def __repr__(self) -> str:
        return (
            f"Err(status={self.status!r}, code={self.code!r}, "
            f"detail={self.detail!r}, params={self.params!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Err):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        params = json.dumps(self.params, sort_keys=True, default=str)
        return hash((self.status, self.code, self.detail, params))


ERR_INTERNAL_SERVER = Err(500, "INTERNAL_SERVER_ERROR", "Internal server error")
ERR_INVALID_BODY = Err(400, "INVALID_REQUEST_BODY", "Invalid request body")


def invalid_body() -> Err:
    """Return the ``ERR_INVALID_BODY`` singleton ready to be raised again.

    Raise it outside any ``except`` block so it holds no reference to the
    decode error or its payload.
    """

    ERR_INVALID_BODY.__cause__ = None
    ERR_INVALID_BODY.__context__ = None
    return ERR_INVALID_BODY.with_traceback(None)


def _chain(exc: BaseException) -> list[BaseException]:
    """Return ``exc`` followed by its causes, outermost first."""

    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return chain


def _frame(exc: BaseException) -> dict[str, Any]:
    stack = [
        f"{entry.filename}:{entry.lineno}:{entry.name}"
        for entry in traceback.extract_tb(exc.__traceback__)
    ]
    return {"message": str(exc), "stack": stack}


def log_unhandled_error(
    log: logging.Logger | logging.LoggerAdapter, exc: BaseException
) -> None:
    chain = _chain(exc)
    if len(chain) > 1:
        error = {
            "root": _frame(chain[-1]),
            "wrap": [_frame(wrapper) for wrapper in chain[:-1]],
        }
        log.error("Unhandled error", extra={"error": error})
        return

    log.error("Unhandled error: %s", exc, extra={"error": {"message": str(exc)}})


def classify(
    exc: BaseException, log: logging.Logger | logging.LoggerAdapter | None = None
) -> Err:
    """Map any exception onto the ``Err`` shown to the caller.

    ``Err`` instances pass through untouched. Anything else becomes
    ``ERR_INTERNAL_SERVER`` and the real cause is logged once.
    """

    if isinstance(exc, Err):
        return exc

    log_unhandled_error(log or logger, exc)
    return ERR_INTERNAL_SERVER
