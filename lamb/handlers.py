"""Adapt context-style handler functions to Lambda entry points."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from lamb import resp
from lamb.context import Context, ObjectContext, RequestContext, StreamContext
from lamb.errors import classify
from lamb.log import get_logger
from lamb.records import Batch, ChangeRecord, ObjectRecord, RequestRecord

ContextT = TypeVar("ContextT", bound=Context)

Handler = Callable[[ContextT], Any]


class Dispatcher(Generic[ContextT]):
    """Owns one user handler and the logger injected at cold start."""

    def __init__(
        self, handler: Handler[ContextT], *, logger: logging.Logger | None = None
    ) -> None:
        functools.update_wrapper(self, handler)
        self.handler = handler
        self.logger = logger or get_logger()

    def context(self, record: BaseModel, lambda_context: Any) -> ContextT:
        raise NotImplementedError


class RequestDispatcher(Dispatcher[RequestContext]):
    """API Gateway proxy entry point. Always returns a response."""

    def context(self, record: RequestRecord, lambda_context: Any) -> RequestContext:
        return RequestContext(
            record, logger=self.logger, lambda_context=lambda_context
        )

    def __call__(
        self, event: dict[str, Any], lambda_context: Any = None
    ) -> dict[str, Any]:
        try:
            record = RequestRecord.model_validate(event)
        except ValidationError as exc:
            return resp.error_response(classify(exc, self.logger))

        ctx = self.context(record, lambda_context)
        try:
            self.handler(ctx)
        except Exception as exc:
            return resp.error_response(classify(exc, ctx.logger))

        return ctx.response.to_proxy()


class BatchDispatcher(Dispatcher[ContextT]):
    """Runs the handler once per record, in order, stopping at the first failure.

    The failing exception is re-raised so the Lambda service redelivers the
    whole batch. Records already handled will be seen again.
    """

    record_model: type[ChangeRecord] | type[ObjectRecord]
    context_class: type[ContextT]

    def context(self, record: BaseModel, lambda_context: Any) -> ContextT:
        return self.context_class(
            record, logger=self.logger, lambda_context=lambda_context
        )

    def __call__(self, event: dict[str, Any], lambda_context: Any = None) -> None:
        try:
            records = Batch.model_validate(event).records
        except ValidationError as exc:
            classify(exc, self.logger)
            raise

        for index, raw in enumerate(records, start=1):
            ctx = None
            try:
                record = self.record_model.model_validate(raw)
                ctx = self.context(record, lambda_context)
                self.handler(ctx)
            except Exception as exc:
                log = ctx.logger if ctx is not None else self.logger
                err = classify(exc, log)
                log.warning(
                    "Aborting batch at record %d of %d: %s",
                    index,
                    len(records),
                    err.code,
                )
                raise


class StreamDispatcher(BatchDispatcher[StreamContext]):
    record_model = ChangeRecord
    context_class = StreamContext


class ObjectDispatcher(BatchDispatcher[ObjectContext]):
    record_model = ObjectRecord
    context_class = ObjectContext


def api_gateway_handler(
    func: Handler[RequestContext] | None = None, *, logger: logging.Logger | None = None
) -> Any:
    """Wrap ``func(ctx: RequestContext)`` as an API Gateway proxy entry point.

    Usable bare (``@api_gateway_handler``) or with a logger
    (``@api_gateway_handler(logger=...)``).
    """

    if func is None:
        return functools.partial(RequestDispatcher, logger=logger)
    return RequestDispatcher(func, logger=logger)


def dynamodb_handler(
    func: Handler[StreamContext] | None = None, *, logger: logging.Logger | None = None
) -> Any:
    """Wrap ``func(ctx: StreamContext)`` as a DynamoDB Streams entry point."""

    if func is None:
        return functools.partial(StreamDispatcher, logger=logger)
    return StreamDispatcher(func, logger=logger)


def s3_handler(
    func: Handler[ObjectContext] | None = None, *, logger: logging.Logger | None = None
) -> Any:
    """Wrap ``func(ctx: ObjectContext)`` as an S3 notification entry point."""

    if func is None:
        return functools.partial(ObjectDispatcher, logger=logger)
    return ObjectDispatcher(func, logger=logger)
