"""S3-backed blob store adapter.

Uses S3 conditional writes: ``put_object(IfMatch=<etag>)`` to replace a blob
only if it is still at the etag the caller read, and
``put_object(IfNoneMatch="*")`` to create a blob that must not exist yet.
S3's own ETag is used as the version token, passed through unmodified.

Error mapping (by ``ClientError`` code):

| S3 code                                   | Raised                        |
|-------------------------------------------|-------------------------------|
| ``NoSuchKey``, ``404``, ``NotFound``      | `BlobNotFoundError`           |
| ``PreconditionFailed``, ``412``,          | `PreconditionFailedError`     |
| ``ConditionalRequestConflict``            |                               |
| anything else, ``BotoCoreError``          | `BlobStoreUnavailableError`   |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from periodica.interfaces.blobstore import (
    AbstractBlobStore,
    BlobNotFoundError,
    BlobStoreUnavailableError,
    PreconditionFailedError,
    VersionedBlob,
)

if TYPE_CHECKING:
    from botocore.client import BaseClient

__all__ = ["S3BlobStore", "make_s3_client"]

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
PRECONDITION_CODES = frozenset(
    {"PreconditionFailed", "412", "ConditionalRequestConflict"}
)
JSON_CONTENT_TYPE = "application/json"


def make_s3_client(
    region: str,
    endpoint_url: str | None = None,
    timeout_s: float = 10.0,
) -> BaseClient:
    """Build a boto3 S3 client with bounded timeouts and standard retries.

    Args:
        region: AWS region name.
        endpoint_url: Optional endpoint override (e.g. LocalStack, MinIO).
        timeout_s: Connect and read timeout, in seconds.
    """
    session = boto3.Session(region_name=region)
    return session.client(
        "s3",
        region_name=region,
        endpoint_url=endpoint_url,
        config=BotoConfig(
            connect_timeout=timeout_s,
            read_timeout=timeout_s,
            retries={"max_attempts": 5, "mode": "standard"},
        ),
    )


def _error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


class S3BlobStore(AbstractBlobStore):
    """`AbstractBlobStore` on top of an S3 (or S3-compatible) bucket.

    Args:
        client: A boto3 S3 client, e.g. from `make_s3_client`.
    """

    def __init__(self, client: BaseClient) -> None:
        self._s3 = client

    def get(self, bucket: str, key: str) -> VersionedBlob:
        try:
            resp = self._s3.get_object(Bucket=bucket, Key=key)
            data = resp["Body"].read()
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise BlobNotFoundError(bucket, key) from e
            raise BlobStoreUnavailableError(str(e)) from e
        except BotoCoreError as e:
            raise BlobStoreUnavailableError(str(e)) from e
        return VersionedBlob(data=data, etag=str(resp.get("ETag", "")))

    def put(
        self, bucket: str, key: str, data: bytes, expected_etag: str | None
    ) -> str:
        kwargs: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": bytes(data),
            "ContentType": JSON_CONTENT_TYPE,
        }
        if expected_etag is None:
            kwargs["IfNoneMatch"] = "*"
        else:
            kwargs["IfMatch"] = expected_etag

        try:
            resp = self._s3.put_object(**kwargs)
        except ParamValidationError as e:
            # botocore too old to know IfMatch/IfNoneMatch
            raise BlobStoreUnavailableError(
                "S3 client does not support conditional write preconditions"
            ) from e
        except ClientError as e:
            code = _error_code(e)
            if code in PRECONDITION_CODES:
                raise PreconditionFailedError(bucket, key, expected_etag) from e
            if code in NOT_FOUND_CODES:
                raise BlobNotFoundError(bucket, key) from e
            raise BlobStoreUnavailableError(str(e)) from e
        except BotoCoreError as e:
            raise BlobStoreUnavailableError(str(e)) from e

        etag = resp.get("ETag")
        if not isinstance(etag, str) or not etag:
            raise BlobStoreUnavailableError(
                f"S3 did not return an ETag for {bucket}/{key}"
            )
        logger.debug("Wrote s3://%s/%s (etag %s)", bucket, key, etag)
        return etag

    def delete(self, bucket: str, key: str) -> None:
        try:
            self._s3.delete_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return
            raise BlobStoreUnavailableError(str(e)) from e
        except BotoCoreError as e:
            raise BlobStoreUnavailableError(str(e)) from e
