"""Pytest configuration for all tests."""

from io import BytesIO
from pathlib import Path
from typing import Generator
from unittest import mock

import pytest
from botocore.exceptions import ClientError

from s3db.domain.entities.database import Database
from s3db.infrastructure.storage.base import StorageBackend
from s3db.infrastructure.storage.file_backend import FileBackend
from s3db.infrastructure.storage.s3_backend import S3Backend, S3BackendSettings


def client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakePaginator:
    """In-memory stand-in for the list_objects_v2 paginator."""

    def __init__(self, client: "FakeS3Client") -> None:
        self.client = client

    def paginate(self, Bucket: str, Prefix: str = "", Delimiter: str | None = None) -> list[dict]:
        keys = sorted(key for key in self.client.objects if key.startswith(Prefix))
        if Delimiter is None:
            return [{"Contents": [{"Key": key} for key in keys]}]

        contents: list[dict] = []
        prefixes: list[str] = []
        for key in keys:
            rest = key[len(Prefix) :]
            if Delimiter in rest:
                common = Prefix + rest.split(Delimiter, 1)[0] + Delimiter
                if common not in prefixes:
                    prefixes.append(common)
            else:
                contents.append({"Key": key})
        return [{"Contents": contents, "CommonPrefixes": [{"Prefix": p} for p in prefixes]}]


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client, keyed by object key."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: str | None = None) -> dict:
        self.objects[Key] = Body
        return {}

    def head_object(self, Bucket: str, Key: str) -> dict:
        if Key not in self.objects:
            raise client_error("404", "Not Found", "HeadObject")
        return {"ContentLength": len(self.objects[Key])}

    def get_object(self, Bucket: str, Key: str) -> dict:
        if Key not in self.objects:
            raise client_error("NoSuchKey", "The specified key does not exist.", "GetObject")
        return {"Body": BytesIO(self.objects[Key]), "ContentType": "application/json"}

    def delete_object(self, Bucket: str, Key: str) -> dict:
        self.objects.pop(Key, None)
        return {}

    def get_paginator(self, operation_name: str) -> FakePaginator:
        assert operation_name == "list_objects_v2"
        return FakePaginator(self)


@pytest.fixture
def file_backend(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FileBackend:
    """Create a FileBackend rooted in a temporary directory.

    The root is relative to a temporary working directory because absolute
    pytest paths contain characters the root path guard rejects.
    """
    monkeypatch.chdir(tmp_path)
    return FileBackend.create("store")


@pytest.fixture
def fake_s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def s3_backend(fake_s3_client: FakeS3Client) -> Generator[S3Backend, None, None]:
    """Create an S3Backend whose boto3 client is an in-memory fake."""
    with mock.patch(
        "s3db.infrastructure.storage.s3_backend.boto3.client", return_value=fake_s3_client
    ):
        yield S3Backend(S3BackendSettings(bucket="test-bucket", prefix="stores"))


@pytest.fixture(params=["file", "s3"])
def backend(request: pytest.FixtureRequest) -> StorageBackend:
    """Run a test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_backend")


@pytest.fixture
def database(backend: StorageBackend) -> Database:
    return Database.create(backend, "testdb")


@pytest.fixture
def file_database(file_backend: FileBackend) -> Database:
    return Database.create(file_backend, "testdb")
