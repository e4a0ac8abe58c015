from meme_lib.observability import setup_observability

from .app import create_app
from .config import AppConfig

config = AppConfig()  # type: ignore

setup_observability(config.observability, service_name="meme-service")

app = create_app(config)
