"""S3 export source implementing IFileStore (read-only)."""

from __future__ import annotations

from contextlib import closing

import boto3
from botocore.exceptions import ClientError

from ghusage.core.exceptions import FileStoreError

_MISSING_CODES = {"NoSuchKey", "NoSuchBucket", "404"}


def split_s3_uri(uri: str, *, require_key: bool = True) -> tuple[str, str]:
    """``s3://bucket/key/path.csv`` -> ``("bucket", "key/path.csv")``.

    With ``require_key=False`` a bare ``s3://bucket`` or ``s3://bucket/prefix/``
    is accepted, for listing.
    """
    if not uri.startswith("s3://"):
        raise FileStoreError(f"Not an S3 URI: {uri!r}")
    bucket, _, key = uri[len("s3://"):].partition("/")
    if not bucket or (require_key and not key):
        raise FileStoreError(f"S3 URI needs a bucket and a key: {uri!r}")
    return bucket, key


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


class S3FileStore:
    """Reads billing exports from one S3 bucket."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self.bucket = bucket
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def uri(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"

    def read(self, path: str) -> bytes:
        try:
            body = self._client.get_object(Bucket=self.bucket, Key=path)["Body"]
        except ClientError as exc:
            code = _error_code(exc)
            if code in _MISSING_CODES:
                raise FileStoreError(f"No export at {self.uri(path)}") from exc
            raise FileStoreError(f"Cannot read {self.uri(path)}: {code}") from exc
        with closing(body):
            return body.read()

    def list_files(self, prefix: str = "") -> list[str]:
        """Object keys under ``prefix``, sorted. Folder placeholder keys are skipped."""
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            pages = list(paginator.paginate(Bucket=self.bucket, Prefix=prefix))
        except ClientError as exc:
            raise FileStoreError(f"Cannot list {self.uri(prefix)}: {_error_code(exc)}") from exc
        return sorted(
            obj["Key"]
            for page in pages
            for obj in page.get("Contents", ())
            if not obj["Key"].endswith("/")
        )
