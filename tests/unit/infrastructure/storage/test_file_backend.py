"""Tests for the local filesystem backend."""

from pathlib import Path

import pytest

from s3db.core.exceptions import AlreadyExistsError, NotEmptyError, NotFoundError, ValidationError
from s3db.infrastructure.storage.file_backend import FileBackend


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestPathGuard:

    @pytest.mark.parametrize("path", ["etc", "/etc/s3db", "store/Home/x", "var", "store/data"])
    def test_blacklisted_components(self, path):
        with pytest.raises(ValidationError, match="is not allowed"):
            FileBackend(path)

    @pytest.mark.parametrize("path", ["my store", "store-1", "../store", "store.d"])
    def test_invalid_characters(self, path):
        with pytest.raises(ValidationError, match="does not match"):
            FileBackend(path)

    def test_blacklist_matches_whole_components(self):
        assert FileBackend("database/etcetera").path == Path("database/etcetera")

    def test_errors_are_combined(self):
        with pytest.raises(ValidationError) as exc_info:
            FileBackend("/etc/my-store")
        assert "`etc` is not allowed" in str(exc_info.value)
        assert "does not match" in str(exc_info.value)


class TestRootLifecycle:

    def test_create_is_reusable(self, workdir):
        FileBackend.create("nested/store")
        backend = FileBackend.create("nested/store")

        assert (workdir / "nested" / "store").is_dir()
        assert backend.path == Path("nested/store")

    def test_create_strict(self, workdir):
        FileBackend.create_strict("store")
        with pytest.raises(AlreadyExistsError):
            FileBackend.create_strict("store")

    def test_destroy(self, workdir):
        backend = FileBackend.create("store")

        assert backend.destroy() is True
        assert backend.destroy() is False
        assert not (workdir / "store").exists()

    def test_destroy_keeps_non_empty_root(self, workdir):
        backend = FileBackend.create("store")
        backend.write_db("app")

        assert backend.destroy() is False
        assert backend.db_exists("app")

    def test_destroy_strict(self, workdir):
        backend = FileBackend.create("store")
        backend.write_db("app")

        with pytest.raises(NotEmptyError):
            backend.destroy_strict()

        backend.delete_db("app")
        assert backend.destroy_strict() is backend
        with pytest.raises(NotFoundError):
            backend.destroy_strict()

    def test_write_db_without_root(self, workdir):
        backend = FileBackend("missing")
        with pytest.raises(NotFoundError):
            backend.write_db("app")


class TestLayout:

    def test_paths(self, file_backend):
        assert file_backend.db_path("app") == str(Path("store/app"))
        assert file_backend.schema_path("app", "people") == str(Path("store/app/people/schema.json"))
        assert file_backend.record_path("app", "people", "a") == str(
            Path("store/app/people/data/a.json")
        )

    def test_files_on_disk(self, file_backend, tmp_path):
        file_backend.write_db("app")
        file_backend.write_collection("app", "people")
        file_backend.write_schema("app", "people", '{"id":"String"}')
        file_backend.write_record("app", "people", "jack", '{"id":"jack","name":"Zoë"}')

        collection_dir = tmp_path / "store" / "app" / "people"
        assert (collection_dir / "schema.json").read_text() == '{"id":"String"}\n'
        assert (collection_dir / "data" / "jack.json").read_text(encoding="utf-8") == (
            '{"id":"jack","name":"Zoë"}\n'
        )

    def test_list_records_skips_foreign_files(self, file_backend, tmp_path):
        file_backend.write_db("app")
        file_backend.write_collection("app", "people")
        data_dir = tmp_path / "store" / "app" / "people" / "data"
        (data_dir / "notes.txt").write_text("x")
        (data_dir / "nested.json").mkdir()
        file_backend.write_record("app", "people", "a", "{}")

        assert file_backend.list_records("app", "people") == ["a"]

    def test_list_collections_skips_files(self, file_backend, tmp_path):
        file_backend.write_db("app")
        file_backend.write_collection("app", "people")
        (tmp_path / "store" / "app" / "README").write_text("x")

        assert file_backend.list_collections("app") == ["people"]

    def test_delete_collection_with_stray_entry_changes_nothing(self, file_backend, tmp_path):
        file_backend.write_db("app")
        file_backend.write_collection("app", "people")
        file_backend.write_schema("app", "people", '{"id":"String"}')
        (tmp_path / "store" / "app" / "people" / "notes").write_text("x")

        with pytest.raises(NotEmptyError):
            file_backend.delete_collection("app", "people")

        assert Path(file_backend.schema_path("app", "people")).exists()
        assert Path(file_backend.data_path("app", "people")).is_dir()

    def test_delete_db_with_stray_file(self, file_backend, tmp_path):
        file_backend.write_db("app")
        (tmp_path / "store" / "app" / "stray").write_text("x")

        with pytest.raises(NotEmptyError):
            file_backend.delete_db("app")
