from typing import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from dishka import Provider, Scope
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

import meme_service.models  # noqa: F401
from meme_service import create_app
from meme_service.clients import ObjectStorage
from meme_service.config import AppConfig, AwsConfig, DatabaseConfig
from meme_service.errors import StorageError
from meme_service.services import ImageUploadService, MemeService

SERVICE_URL = "http://storage.test:9000"
BUCKET = "memes"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class InMemoryStorage:
    """Test double for object storage."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str, bool]] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.fail_puts = False
        self.fail_deletes = False

    async def put(
        self, key: str, data: bytes, content_type: str, public: bool = True
    ) -> None:
        self.put_calls.append(key)
        if self.fail_puts:
            raise StorageError(f"Failed to store {key}")
        self.objects[key] = (data, content_type, public)

    async def delete(self, key: str) -> None:
        self.delete_calls.append(key)
        if self.fail_deletes:
            raise ConnectionError("storage is unreachable")
        self.objects.pop(key, None)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def aws_config() -> AwsConfig:
    return AwsConfig(service_url=SERVICE_URL, bucket_name=BUCKET)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "memes.db"


@pytest.fixture
def app_config(db_path, aws_config) -> AppConfig:
    return AppConfig(
        db=DatabaseConfig(url=f"sqlite+aiosqlite:///{db_path}"),
        aws=aws_config,
    )


@pytest.fixture
def app(app_config, storage) -> FastAPI:
    storage_override = Provider(scope=Scope.APP)

    def get_storage() -> ObjectStorage:
        return storage

    storage_override.provide(get_storage)

    return create_app(app_config, storage_override)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def engine(db_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def uploader(storage, aws_config) -> ImageUploadService:
    return ImageUploadService(storage, aws_config)


@pytest.fixture
def meme_service(engine, uploader) -> MemeService:
    return MemeService(engine, uploader)
