"""One handler style for API Gateway, DynamoDB Streams and S3 triggered Lambdas."""

from lamb.binder import Validatable, bind, bind_attributes
from lamb.context import (
    Context,
    ObjectContext,
    OperationType,
    RequestContext,
    StreamContext,
)
from lamb.errors import ERR_INTERNAL_SERVER, ERR_INVALID_BODY, Err, classify
from lamb.handlers import (
    ObjectDispatcher,
    RequestDispatcher,
    StreamDispatcher,
    api_gateway_handler,
    dynamodb_handler,
    s3_handler,
)
from lamb.log import configure_logging
from lamb.resp import Response

__version__ = "0.1.0"

__all__ = [
    "ERR_INTERNAL_SERVER",
    "ERR_INVALID_BODY",
    "Context",
    "Err",
    "ObjectContext",
    "ObjectDispatcher",
    "OperationType",
    "RequestContext",
    "RequestDispatcher",
    "Response",
    "StreamContext",
    "StreamDispatcher",
    "Validatable",
    "api_gateway_handler",
    "bind",
    "bind_attributes",
    "classify",
    "configure_logging",
    "dynamodb_handler",
    "s3_handler",
]
