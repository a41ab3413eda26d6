"""Infrastructure layer - storage backends.

The infrastructure layer implements the storage contract the domain
entities persist through: a local filesystem backend and an S3 backend.
"""
