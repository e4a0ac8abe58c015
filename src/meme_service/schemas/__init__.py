from .meme import Meme, MemeCreate, MemeUpdate

__all__ = [
    "Meme",
    "MemeCreate",
    "MemeUpdate",
]
