from .storage import ObjectStorage, S3Storage, storage_provider

__all__ = [
    "ObjectStorage",
    "S3Storage",
    "storage_provider",
]
