from .meme import Meme

__all__ = [
    "Meme",
]
