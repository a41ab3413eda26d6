"""Tests for the storage backend base contract."""

import pytest

from s3db.core.exceptions import AlreadyExistsError, NotEmptyError, NotFoundError, ValidationError
from s3db.infrastructure.storage.base import StorageBackend, as_file_contents, record_filename
from s3db.infrastructure.storage.file_backend import FileBackend
from s3db.infrastructure.storage.s3_backend import S3Backend


def test_storage_backend_is_abstract() -> None:
    """StorageBackend cannot be instantiated directly."""
    with pytest.raises(TypeError):
        StorageBackend()  # type: ignore[abstract]


def test_backends_implement_storage_backend(file_backend: FileBackend, s3_backend: S3Backend) -> None:
    assert isinstance(file_backend, StorageBackend)
    assert isinstance(s3_backend, StorageBackend)


def test_record_filename() -> None:
    assert record_filename("jack") == "jack.json"
    with pytest.raises(ValidationError):
        record_filename("../jack")


def test_as_file_contents_appends_single_newline() -> None:
    assert as_file_contents("{}") == "{}\n"
    assert as_file_contents("{}\n") == "{}\n"


def test_as_file_contents_requires_string() -> None:
    with pytest.raises(ValidationError, match="must be a string"):
        as_file_contents({"id": "x"})


class TestBackendBehaviour:
    """Behaviour every backend shares, run against each implementation."""

    @pytest.fixture
    def populated(self, backend: StorageBackend) -> StorageBackend:
        backend.write_db("app")
        backend.write_collection("app", "people")
        backend.write_schema("app", "people", '{"id":"String"}')
        return backend

    def test_write_db_twice(self, backend):
        backend.write_db("app")
        with pytest.raises(AlreadyExistsError):
            backend.write_db("app")

    def test_db_exists(self, backend):
        assert not backend.db_exists("app")
        backend.write_db("app")
        assert backend.db_exists("app")

    def test_schema_round_trip(self, populated):
        assert populated.read_schema("app", "people") == '{"id":"String"}\n'

    def test_write_collection_is_idempotent(self, populated):
        populated.write_record("app", "people", "a", '{"id":"a"}')
        populated.write_collection("app", "people")

        assert populated.list_records("app", "people") == ["a"]

    def test_record_round_trip(self, populated):
        assert populated.write_record("app", "people", "a", '{"id":"a"}') == '{"id":"a"}'
        assert populated.read_record("app", "people", "a") == '{"id":"a"}\n'

    def test_record_overwrite(self, populated):
        populated.write_record("app", "people", "a", '{"id":"a","v":1}')
        populated.write_record("app", "people", "a", '{"id":"a","v":2}')

        assert populated.read_record("app", "people", "a") == '{"id":"a","v":2}\n'

    def test_write_record_rejects_non_string(self, populated):
        with pytest.raises(ValidationError):
            populated.write_record("app", "people", "a", {"id": "a"})

    def test_missing_reads(self, populated):
        with pytest.raises(NotFoundError):
            populated.read_record("app", "people", "ghost")
        with pytest.raises(NotFoundError):
            populated.read_schema("app", "ghost")
        with pytest.raises(NotFoundError):
            populated.list_records("app", "ghost")
        with pytest.raises(NotFoundError):
            populated.list_collections("ghost")

    def test_write_into_missing_namespace(self, backend):
        with pytest.raises(NotFoundError):
            backend.write_collection("ghost", "people")
        backend.write_db("app")
        with pytest.raises(NotFoundError):
            backend.write_record("app", "ghost", "a", "{}")

    def test_listings(self, populated):
        populated.write_collection("app", "pets")
        populated.write_record("app", "people", "a", "{}")
        populated.write_record("app", "people", "b", "{}")

        assert sorted(populated.list_collections("app")) == ["people", "pets"]
        assert sorted(populated.list_records("app", "people")) == ["a", "b"]
        assert populated.list_records("app", "pets") == []

    def test_delete_record(self, populated):
        populated.write_record("app", "people", "a", "{}")

        assert populated.delete_record("app", "people", "a") == "a"
        assert populated.delete_record("app", "people", "a") is None
        with pytest.raises(NotFoundError):
            populated.delete_record_strict("app", "people", "a")

    def test_delete_collection(self, populated):
        populated.write_record("app", "people", "a", "{}")
        with pytest.raises(NotEmptyError):
            populated.delete_collection("app", "people")
        # A refused delete keeps the schema
        assert populated.read_schema("app", "people")

        populated.delete_record("app", "people", "a")
        assert populated.delete_collection("app", "people") == ["people"]
        assert populated.delete_collection("app", "people") == []
        assert populated.list_collections("app") == []

    def test_delete_db(self, populated):
        with pytest.raises(NotEmptyError):
            populated.delete_db("app")

        populated.delete_collection("app", "people")
        assert populated.delete_db("app") == ["app"]
        assert populated.delete_db("app") == []
        assert not populated.db_exists("app")

    def test_names_are_sanitized(self, backend):
        with pytest.raises(ValidationError):
            backend.write_db("bad name")
        with pytest.raises(ValidationError):
            backend.db_path("../up")
