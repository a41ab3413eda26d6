"""Domain entities for S3DB.

Database, Collection and Record depend on the storage contract and are
imported from their own modules (or from the top-level ``s3db`` package).
"""

from s3db.domain.entities.schema import ID_FIELD, FieldType, Schema
from s3db.domain.entities.collection_config import CollectionConfig

__all__ = [
    "CollectionConfig",
    "FieldType",
    "ID_FIELD",
    "Schema",
]
