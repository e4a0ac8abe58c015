import logging

from dishka import Provider, Scope
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel.ext.asyncio.session import AsyncSession

from meme_service.errors import InvalidInputError, MemeServiceError, NotFoundError, UploadError
from meme_service.models import Meme as MemeModel
from meme_service.repositories import memes
from meme_service.schemas.meme import Meme, MemeCreate, MemeUpdate

from .upload import ImageUploadService

logger = logging.getLogger(__name__)


class MemeService:
    def __init__(self, engine: AsyncEngine, uploader: ImageUploadService) -> None:
        self._engine = engine
        self._uploader = uploader

    def _to_schema(self, meme_model: MemeModel) -> Meme:
        if meme_model.id is None:
            raise RuntimeError("Meme must be flushed before it is returned")
        return Meme(
            id=meme_model.id,
            image_url=meme_model.image_url,
            created_at=meme_model.created_at,
            keywords=list(meme_model.keywords),
        )

    async def list_memes(self) -> list[Meme]:
        async with AsyncSession(self._engine) as session:
            meme_models = await memes.find_all(session)
            return [self._to_schema(meme) for meme in meme_models]

    async def get_meme(self, meme_id: int) -> Meme:
        async with AsyncSession(self._engine) as session:
            meme_model = await memes.find_by_id(session, meme_id)
            if meme_model is None:
                raise NotFoundError(f"Meme {meme_id} not found")
            return self._to_schema(meme_model)

    async def _insert(self, image_url: str, keywords: list[str]) -> Meme:
        async with AsyncSession(self._engine) as session:
            meme_model = memes.create(session, image_url=image_url, keywords=keywords)
            await session.flush()

            schema = self._to_schema(meme_model)

            await session.commit()

        logger.info("Meme created", extra={"meme_id": schema.id})
        return schema

    async def create_meme(self, meme_create: MemeCreate) -> Meme:
        return await self._insert(meme_create.image_url, meme_create.keywords)

    async def upload_meme(
        self,
        data: bytes | None,
        content_type: str | None,
        original_name: str | None,
        keywords_csv: str | None = "",
    ) -> Meme:
        uploaded = await self._uploader.upload(
            data, content_type, original_name, keywords_csv
        )

        # No rollback of the stored object: if the insert fails it stays orphaned.
        try:
            return await self._insert(uploaded.image_url, uploaded.keywords)
        except MemeServiceError:
            raise
        except Exception as exc:
            logger.exception(
                "Failed to save uploaded meme", extra={"image_url": uploaded.image_url}
            )
            raise UploadError("Failed to save uploaded meme") from exc

    async def replace_meme(self, meme_id: int, meme_update: MemeUpdate) -> None:
        if meme_update.id is not None and meme_update.id != meme_id:
            raise InvalidInputError(
                f"Meme id {meme_update.id} does not match path id {meme_id}"
            )

        async with AsyncSession(self._engine) as session:
            meme_model = await memes.find_by_id(session, meme_id)
            if meme_model is None:
                raise NotFoundError(f"Meme {meme_id} not found")

            memes.replace(
                meme_model,
                image_url=meme_update.image_url,
                keywords=meme_update.keywords,
            )
            await session.commit()

        logger.info("Meme replaced", extra={"meme_id": meme_id})

    async def delete_meme(self, meme_id: int) -> None:
        async with AsyncSession(self._engine) as session:
            meme_model = await memes.find_by_id(session, meme_id)
            if meme_model is None:
                raise NotFoundError(f"Meme {meme_id} not found")

            # Storage first; whatever happens there, the row goes.
            await self._uploader.delete(meme_model.image_url)

            await memes.delete(session, meme_model)
            await session.commit()

        logger.info("Meme deleted", extra={"meme_id": meme_id})


meme_service_provider = Provider(scope=Scope.APP)
meme_service_provider.provide(MemeService)
