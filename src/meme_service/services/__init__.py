from .meme import MemeService, meme_service_provider
from .upload import ImageUploadService, UploadedImage, upload_service_provider

__all__ = [
    "ImageUploadService",
    "MemeService",
    "UploadedImage",
    "meme_service_provider",
    "upload_service_provider",
]
