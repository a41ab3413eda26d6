"""Backend factory for resolving the configured storage backend."""

from s3db.core.config import Settings, get_settings
from s3db.core.logging import get_logger
from s3db.infrastructure.storage.base import StorageBackend
from s3db.infrastructure.storage.file_backend import FileBackend
from s3db.infrastructure.storage.s3_backend import S3Backend, S3BackendSettings

logger = get_logger(__name__)


def get_backend(settings: Settings | None = None) -> StorageBackend:
    """Build the storage backend selected by settings.

    The file backend's root directory is created if it does not exist yet.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.

    Returns:
        A ready-to-use storage backend.

    Raises:
        ValueError: If the configured backend is not supported.
    """
    if settings is None:
        settings = get_settings()

    if settings.storage_backend == "file":
        logger.info("Using file storage backend", path=settings.storage_path)
        return FileBackend.create(settings.storage_path)

    if settings.storage_backend == "s3":
        s3_settings = S3BackendSettings(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            prefix=settings.s3_prefix,
        )
        logger.info("Using S3 storage backend", bucket=s3_settings.bucket, prefix=s3_settings.prefix)
        return S3Backend(settings=s3_settings)

    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")
