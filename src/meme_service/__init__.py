from .app import create_app
from .config import AppConfig

__all__ = ["AppConfig", "create_app"]
