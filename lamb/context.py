"""Per-invocation contexts handed to handler functions."""

from __future__ import annotations

import base64
import logging
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel

from lamb import resp
from lamb.binder import bind, bind_attributes
from lamb.errors import invalid_body
from lamb.log import RecordLogger, get_logger
from lamb.records import ChangeRecord, ObjectRecord, RequestRecord

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound=BaseModel)


class OperationType(str, Enum):
    INSERT = "INSERT"
    MODIFY = "MODIFY"
    REMOVE = "REMOVE"


class Context(Generic[RecordT]):
    """Convenience methods shared by every trigger.

    Subclasses say where ``bind`` reads from (``bind_payload``) and how the
    record is described in logs (``describe``).
    """

    trigger = "lambda"

    def __init__(
        self,
        record: RecordT,
        *,
        logger: logging.Logger | None = None,
        lambda_context: Any = None,
    ) -> None:
        self.record = record
        self.lambda_context = lambda_context
        self.response = resp.Response()
        self.logger = RecordLogger(
            logger or get_logger(),
            {"trigger": self.trigger, "operation": self.describe()},
        )

    def bind_payload(self) -> str | bytes | Mapping[str, Any]:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def bind(self, target: type[T]) -> T:
        """Decode the trigger payload into ``target``.

        Raises ``ERR_INVALID_BODY`` when the payload does not decode, or
        whatever ``target.check`` raises.
        """

        return bind(self.bind_payload(), target)

    def json(self, status_code: int, body: Any) -> None:
        """Write ``body`` and ``status_code`` to the response."""

        response = resp.build(status_code, body)
        if self.response.headers:
            response.headers = {**(response.headers or {}), **self.response.headers}
        self.response = response

    def header(self, key: str, value: str) -> None:
        if self.response.headers is None:
            self.response.headers = {key: value}
            return
        self.response.headers[key] = value

    def created(self, location: str) -> None:
        """Write a 201 with the resource location.

        Use ``ctx.json(201, None)`` to skip the ``Location`` header.
        """

        self.header("Location", location)
        self.json(201, None)

    def ok(self, body: Any) -> None:
        self.json(200, body)


class RequestContext(Context[RequestRecord]):
    """Context for API Gateway proxy requests."""

    trigger = "apigateway"

    @property
    def request(self) -> RequestRecord:
        return self.record

    def describe(self) -> str:
        return f"{self.record.http_method} {self.record.path}".strip()

    def bind_payload(self) -> str | bytes:
        body = self.record.body or ""
        if not self.record.is_base64_encoded:
            return body
        decoded = None
        try:
            decoded = base64.b64decode(body, validate=True)
        except ValueError:
            pass
        if decoded is None:
            raise invalid_body()
        return decoded


class StreamContext(Context[ChangeRecord]):
    """Context for a single DynamoDB Streams record."""

    trigger = "dynamodb"

    def __init__(self, record: ChangeRecord, **kwargs: Any) -> None:
        self._event_type = OperationType(record.event_name)
        super().__init__(record, **kwargs)

    @property
    def event_type(self) -> OperationType:
        return self._event_type

    def describe(self) -> str:
        return self._event_type.value

    def bind_payload(self) -> Mapping[str, Any]:
        # Removals carry no image, only the keys.
        change = self.record.dynamodb
        if self._event_type is OperationType.REMOVE:
            return change.keys
        return change.new_image or {}

    def bind(self, target: type[T]) -> T:
        return bind_attributes(self.bind_payload(), target)


class ObjectContext(Context[ObjectRecord]):
    """Context for a single S3 notification record."""

    trigger = "s3"

    @property
    def bucket(self) -> str:
        return self.record.bucket

    @property
    def key(self) -> str:
        return self.record.key

    def describe(self) -> str:
        return self.record.event_name

    def bind_payload(self) -> Mapping[str, Any]:
        return self.record.model_dump(mode="json", by_alias=True)
