"""Pydantic models for the Lambda trigger events."""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class RequestRecord(_Record):
    """API Gateway proxy request."""

    http_method: str = Field("", alias="httpMethod")
    path: str = ""
    resource: str | None = None
    headers: dict[str, str] | None = None
    query_string_parameters: dict[str, str] | None = Field(
        None, alias="queryStringParameters"
    )
    path_parameters: dict[str, str] | None = Field(None, alias="pathParameters")
    request_context: dict[str, Any] | None = Field(None, alias="requestContext")
    body: str | None = None
    is_base64_encoded: bool = Field(False, alias="isBase64Encoded")

    @field_validator(
        "headers", "query_string_parameters", "path_parameters", mode="before"
    )
    @classmethod
    def stringify_values(cls, value: Any) -> Any:
        # Test consoles and proxies sometimes send numbers or nulls.
        if not isinstance(value, dict):
            return value
        return {
            key: item if isinstance(item, str) else str(item)
            for key, item in value.items()
            if item is not None
        }

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""

        wanted = name.lower()
        for key, value in (self.headers or {}).items():
            if key.lower() == wanted:
                return value
        return default


class StreamRecord(_Record):
    keys: dict[str, Any] = Field(default_factory=dict, alias="Keys")
    new_image: dict[str, Any] | None = Field(None, alias="NewImage")
    old_image: dict[str, Any] | None = Field(None, alias="OldImage")
    sequence_number: str | None = Field(None, alias="SequenceNumber")
    stream_view_type: str | None = Field(None, alias="StreamViewType")


class ChangeRecord(_Record):
    """One DynamoDB Streams record."""

    event_id: str | None = Field(None, alias="eventID")
    event_name: str = Field(..., alias="eventName")
    event_source: str | None = Field(None, alias="eventSource")
    dynamodb: StreamRecord = Field(default_factory=StreamRecord)


class S3Bucket(_Record):
    name: str = ""
    arn: str | None = None


class S3Object(_Record):
    key: str = ""
    size: int | None = None
    e_tag: str | None = Field(None, alias="eTag")
    version_id: str | None = Field(None, alias="versionId")
    sequencer: str | None = None


class S3Entity(_Record):
    bucket: S3Bucket = Field(default_factory=S3Bucket)
    object: S3Object = Field(default_factory=S3Object)


class ObjectRecord(_Record):
    """One S3 event notification record."""

    event_name: str = Field("", alias="eventName")
    event_time: str | None = Field(None, alias="eventTime")
    aws_region: str | None = Field(None, alias="awsRegion")
    s3: S3Entity = Field(default_factory=S3Entity)

    @property
    def bucket(self) -> str:
        return self.s3.bucket.name

    @property
    def key(self) -> str:
        # S3 delivers keys form-encoded ("my+file%21.csv").
        return unquote_plus(self.s3.object.key)


class Batch(_Record):
    """Batch envelope. Records stay raw until their turn comes."""

    records: list[Any] = Field(default_factory=list, alias="Records")
