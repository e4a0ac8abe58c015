class MemeServiceError(Exception):
    """Base class for errors the HTTP layer maps to a response."""


class InvalidInputError(MemeServiceError):
    pass


class NotFoundError(MemeServiceError):
    pass


class UploadError(MemeServiceError):
    """Upload failed for a reason the client should not see."""


class StorageError(UploadError):
    pass
