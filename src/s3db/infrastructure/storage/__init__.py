"""Storage backends and the backend factory."""

from s3db.infrastructure.storage.backend_factory import get_backend
from s3db.infrastructure.storage.base import StorageBackend, record_filename
from s3db.infrastructure.storage.file_backend import FileBackend
from s3db.infrastructure.storage.s3_backend import S3Backend, S3BackendSettings

__all__ = [
    "FileBackend",
    "S3Backend",
    "S3BackendSettings",
    "StorageBackend",
    "get_backend",
    "record_filename",
]
