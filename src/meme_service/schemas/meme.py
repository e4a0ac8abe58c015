from datetime import datetime, timezone
from typing import Annotated

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from meme_service.models.meme import MAX_IMAGE_URL_LENGTH, MAX_KEYWORDS

_url_adapter = TypeAdapter(AnyHttpUrl)


def _check_url(value: str) -> str:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL format") from None
    return value


ImageUrl = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_IMAGE_URL_LENGTH),
    AfterValidator(_check_url),
]
Keyword = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
KEYWORDS = Field(default_factory=list, max_length=MAX_KEYWORDS)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MemeCreate(CamelModel):
    image_url: ImageUrl
    keywords: list[Keyword] = KEYWORDS


class MemeUpdate(MemeCreate):
    id: int | None = None


class Meme(CamelModel):
    id: int
    image_url: str
    created_at: datetime
    keywords: list[str]

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
