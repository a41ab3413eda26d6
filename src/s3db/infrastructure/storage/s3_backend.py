"""Amazon S3 storage backend.

Uses the same layout as the file backend, as object keys. Directories are
zero-byte marker objects whose keys end in ``/`` so that database conflicts,
non-empty deletes and collection listing behave exactly as on disk.
"""

from collections.abc import Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict

from s3db.core.exceptions import AlreadyExistsError, NotEmptyError, NotFoundError
from s3db.core.logging import get_logger
from s3db.domain.services.name_sanitizer import NameSanitizer
from s3db.infrastructure.storage.base import (
    DATA_DIRNAME,
    RECORD_EXTENSION,
    SCHEMA_FILENAME,
    StorageBackend,
    as_file_contents,
    record_filename,
)

logger = get_logger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BackendSettings(BaseModel):
    """Configuration settings for the S3 storage backend."""

    model_config = ConfigDict(from_attributes=True)

    bucket: str
    region: str = "us-east-1"
    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint_url: str | None = None
    prefix: str = ""


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3Backend(StorageBackend):
    """Storage backend keeping one JSON object per record in a bucket."""

    def __init__(self, settings: S3BackendSettings) -> None:
        self.settings = settings
        self._client = None

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs = {"region_name": self.settings.region}
            if self.settings.access_key_id:
                client_kwargs["aws_access_key_id"] = self.settings.access_key_id
                client_kwargs["aws_secret_access_key"] = self.settings.secret_access_key
            if self.settings.endpoint_url:
                client_kwargs["endpoint_url"] = self.settings.endpoint_url

            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    # Key helpers

    def _key(self, *parts: str) -> str:
        prefix = self.settings.prefix.strip("/")
        return "/".join([prefix, *parts] if prefix else parts)

    def db_path(self, db_name: str) -> str:
        return self._key(NameSanitizer.sanitize(db_name)) + "/"

    def collection_path(self, db_name: str, collection_name: str) -> str:
        return self.db_path(db_name) + NameSanitizer.sanitize(collection_name) + "/"

    def schema_path(self, db_name: str, collection_name: str) -> str:
        return self.collection_path(db_name, collection_name) + SCHEMA_FILENAME

    def data_path(self, db_name: str, collection_name: str) -> str:
        return self.collection_path(db_name, collection_name) + DATA_DIRNAME + "/"

    def record_path(self, db_name: str, collection_name: str, record_id: str) -> str:
        return self.data_path(db_name, collection_name) + record_filename(record_id)

    # Object primitives

    def _exists(self, key: str) -> bool:
        try:
            self._get_client().head_object(Bucket=self.settings.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise RuntimeError(f"Failed to check S3 object: {str(e)}") from e
        except BotoCoreError as e:
            raise RuntimeError(f"Failed to check S3 object: {str(e)}") from e
        return True

    def _put(self, key: str, body: str = "") -> None:
        try:
            self._get_client().put_object(
                Bucket=self.settings.bucket,
                Key=key,
                Body=body.encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            raise RuntimeError(f"Failed to write S3 object: {str(e)}") from e

    def _get(self, key: str, missing_message: str) -> str:
        try:
            response = self._get_client().get_object(Bucket=self.settings.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise NotFoundError(missing_message) from e
            raise RuntimeError(f"Failed to fetch S3 object: {str(e)}") from e
        except BotoCoreError as e:
            raise RuntimeError(f"Failed to fetch S3 object: {str(e)}") from e

        return response["Body"].read().decode("utf-8")

    def _delete(self, key: str) -> None:
        try:
            self._get_client().delete_object(Bucket=self.settings.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise RuntimeError(f"Failed to delete S3 object: {str(e)}") from e

    def _pages(self, prefix: str, delimiter: str | None = None) -> Iterator[dict]:
        kwargs = {"Bucket": self.settings.bucket, "Prefix": prefix}
        if delimiter:
            kwargs["Delimiter"] = delimiter
        try:
            paginator = self._get_client().get_paginator("list_objects_v2")
            yield from paginator.paginate(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RuntimeError(f"Failed to list S3 objects: {str(e)}") from e

    def _keys_under(self, prefix: str) -> list[str]:
        return [obj["Key"] for page in self._pages(prefix) for obj in page.get("Contents", [])]

    # Writes

    def write_db(self, db_name: str) -> str:
        marker = self.db_path(db_name)
        if self._keys_under(marker):
            raise AlreadyExistsError(f"Database '{db_name}' already exists")

        self._put(marker)
        logger.debug("Database marker created", database=db_name, key=marker)
        return db_name

    def write_collection(self, db_name: str, collection_name: str) -> str:
        if not self.db_exists(db_name):
            raise NotFoundError(f"Database '{db_name}' does not exist")

        for marker in (
            self.collection_path(db_name, collection_name),
            self.data_path(db_name, collection_name),
        ):
            if not self._exists(marker):
                self._put(marker)

        logger.debug("Collection markers ready", database=db_name, collection=collection_name)
        return collection_name

    def write_schema(self, db_name: str, collection_name: str, schema: str) -> str:
        contents = as_file_contents(schema)
        if not self._exists(self.collection_path(db_name, collection_name)):
            raise NotFoundError(f"Collection '{collection_name}' does not exist")

        self._put(self.schema_path(db_name, collection_name), contents)
        logger.debug("Schema written", database=db_name, collection=collection_name)
        return schema

    def write_record(self, db_name: str, collection_name: str, record_id: str, data: str) -> str:
        contents = as_file_contents(data)
        key = self.record_path(db_name, collection_name, record_id)
        if not self._exists(self.data_path(db_name, collection_name)):
            raise NotFoundError(f"Collection '{collection_name}' does not exist")

        self._put(key, contents)
        logger.debug(
            "Record written", database=db_name, collection=collection_name, record_id=record_id
        )
        return data

    # Reads

    def read_schema(self, db_name: str, collection_name: str) -> str:
        return self._get(
            self.schema_path(db_name, collection_name),
            f"Schema for collection '{collection_name}' does not exist",
        )

    def read_record(self, db_name: str, collection_name: str, record_id: str) -> str:
        return self._get(
            self.record_path(db_name, collection_name, record_id),
            f"Record '{record_id}' does not exist",
        )

    def list_records(self, db_name: str, collection_name: str) -> list[str]:
        prefix = self.data_path(db_name, collection_name)
        if not self._exists(prefix):
            raise NotFoundError(f"Collection '{collection_name}' does not exist")

        records = []
        for key in self._keys_under(prefix):
            name = key[len(prefix) :]
            if "/" in name or not name.endswith(RECORD_EXTENSION):
                continue
            records.append(name[: -len(RECORD_EXTENSION)])
        return records

    def list_collections(self, db_name: str) -> list[str]:
        prefix = self.db_path(db_name)
        if not self.db_exists(db_name):
            raise NotFoundError(f"Database '{db_name}' does not exist")

        return [
            common["Prefix"][len(prefix) :].rstrip("/")
            for page in self._pages(prefix, delimiter="/")
            for common in page.get("CommonPrefixes", [])
        ]

    def db_exists(self, db_name: str) -> bool:
        return self._exists(self.db_path(db_name))

    # Deletes

    def delete_db(self, db_name: str) -> list[str]:
        marker = self.db_path(db_name)
        keys = self._keys_under(marker)
        if not keys:
            return []
        if any(key != marker for key in keys):
            raise NotEmptyError(f"Database '{db_name}' is not empty")

        self._delete(marker)
        logger.debug("Database marker removed", database=db_name)
        return [db_name]

    def delete_collection(self, db_name: str, collection_name: str) -> list[str]:
        collection_marker = self.collection_path(db_name, collection_name)
        keys = self._keys_under(collection_marker)
        if not keys:
            return []

        data_marker = self.data_path(db_name, collection_name)
        schema_key = self.schema_path(db_name, collection_name)
        if any(key.startswith(data_marker) and key != data_marker for key in keys):
            raise NotEmptyError(f"Collection '{collection_name}' data is not empty")
        if any(key not in (collection_marker, data_marker, schema_key) for key in keys):
            raise NotEmptyError(f"Collection '{collection_name}' is not empty")

        for key in (schema_key, data_marker, collection_marker):
            if key in keys:
                self._delete(key)

        logger.debug("Collection markers removed", database=db_name, collection=collection_name)
        return [collection_name]

    def delete_record(self, db_name: str, collection_name: str, record_id: str) -> str | None:
        try:
            return self.delete_record_strict(db_name, collection_name, record_id)
        except NotFoundError:
            return None

    def delete_record_strict(self, db_name: str, collection_name: str, record_id: str) -> str:
        key = self.record_path(db_name, collection_name, record_id)
        if not self._exists(key):
            raise NotFoundError(f"Record '{record_id}' does not exist")

        self._delete(key)
        logger.debug(
            "Record removed", database=db_name, collection=collection_name, record_id=record_id
        )
        return record_id
