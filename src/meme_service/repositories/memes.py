from datetime import datetime

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from meme_service.models import Meme


async def find_all(session: AsyncSession) -> list[Meme]:
    stmt = select(Meme).order_by(col(Meme.created_at).desc(), col(Meme.id).desc())
    result = await session.exec(stmt)
    return list(result.all())


async def find_by_id(session: AsyncSession, meme_id: int) -> Meme | None:
    return await session.get(Meme, meme_id)


def create(
    session: AsyncSession,
    image_url: str,
    keywords: list[str],
    created_at: datetime | None = None,
) -> Meme:
    meme = Meme(image_url=image_url, keywords=keywords)
    if created_at is not None:
        meme.created_at = created_at
    session.add(meme)
    return meme


def replace(meme: Meme, image_url: str, keywords: list[str]) -> Meme:
    # id and created_at are immutable
    meme.image_url = image_url
    meme.keywords = keywords
    return meme


async def delete(session: AsyncSession, meme: Meme) -> None:
    await session.delete(meme)
