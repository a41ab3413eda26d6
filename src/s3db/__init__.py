"""S3DB - schema-validated JSON document store.

Records are stored as individual JSON files under a
``<database>/<collection>/data/<id>.json`` layout on a local directory or an
S3 bucket.
"""

__version__ = "0.1.0"

from s3db.core.exceptions import (
    AlreadyExistsError,
    MissingConfigError,
    NotEmptyError,
    NotFoundError,
    S3DBError,
    ValidationError,
)
from s3db.domain.entities.collection import Collection
from s3db.domain.entities.collection_config import CollectionConfig
from s3db.domain.entities.database import Database
from s3db.domain.entities.record import Record
from s3db.domain.entities.schema import FieldType, Schema
from s3db.infrastructure.storage import (
    FileBackend,
    S3Backend,
    S3BackendSettings,
    StorageBackend,
    get_backend,
)

__all__ = [
    "__version__",
    "AlreadyExistsError",
    "Collection",
    "CollectionConfig",
    "Database",
    "FieldType",
    "FileBackend",
    "MissingConfigError",
    "NotEmptyError",
    "NotFoundError",
    "Record",
    "S3Backend",
    "S3BackendSettings",
    "S3DBError",
    "Schema",
    "StorageBackend",
    "ValidationError",
    "get_backend",
]
