from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, File, Form, Request, Response, UploadFile, status

from .schemas import Meme, MemeCreate, MemeUpdate
from .services import MemeService
from .services.upload import MAX_IMAGE_SIZE

router = APIRouter(prefix="/memes", tags=["memes"])


def _set_location(request: Request, response: Response, meme: Meme) -> None:
    response.headers["Location"] = str(request.url_for("get_meme", meme_id=meme.id))


async def read_image(image_file: UploadFile | None) -> bytes | None:
    """Read at most one byte past the size limit so oversized uploads still fail validation."""
    if image_file is None:
        return None
    return await image_file.read(MAX_IMAGE_SIZE + 1)


@router.get("", response_model=list[Meme])
@inject
async def list_memes(meme_service: FromDishka[MemeService]) -> list[Meme]:
    return await meme_service.list_memes()


@router.get("/{meme_id}", response_model=Meme)
@inject
async def get_meme(meme_id: int, meme_service: FromDishka[MemeService]) -> Meme:
    return await meme_service.get_meme(meme_id)


@router.post("", response_model=Meme, status_code=status.HTTP_201_CREATED)
@inject
async def create_meme(
    meme: MemeCreate,
    request: Request,
    response: Response,
    meme_service: FromDishka[MemeService],
) -> Meme:
    created = await meme_service.create_meme(meme)
    _set_location(request, response, created)
    return created


@router.post("/upload", response_model=Meme, status_code=status.HTTP_201_CREATED)
@inject
async def upload_meme(
    request: Request,
    response: Response,
    meme_service: FromDishka[MemeService],
    image_file: UploadFile | None = File(default=None, alias="imageFile"),
    keywords: str = Form(default=""),
) -> Meme:
    data = await read_image(image_file)

    created = await meme_service.upload_meme(
        data,
        content_type=image_file.content_type if image_file is not None else None,
        original_name=image_file.filename if image_file is not None else None,
        keywords_csv=keywords,
    )
    _set_location(request, response, created)
    return created


@router.put("/{meme_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def replace_meme(
    meme_id: int, meme: MemeUpdate, meme_service: FromDishka[MemeService]
) -> None:
    await meme_service.replace_meme(meme_id, meme)


@router.delete("/{meme_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_meme(meme_id: int, meme_service: FromDishka[MemeService]) -> None:
    await meme_service.delete_meme(meme_id)


health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
