import sqlalchemy as sa
from sqlmodel import Field

from .base import IdBase

KEYWORD_DELIMITER = ","
MAX_KEYWORDS = 10
MAX_IMAGE_URL_LENGTH = 2000


class KeywordList(sa.TypeDecorator):
    """Stores a list of keywords as one comma-joined text column.

    Keywords containing a comma do not survive a round trip: they come back
    split into several keywords. Empty entries are dropped on read.
    """

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return KEYWORD_DELIMITER.join(value or [])

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return [keyword for keyword in value.split(KEYWORD_DELIMITER) if keyword]


class Meme(IdBase, table=True):
    __tablename__ = "memes"  # type:ignore

    image_url: str = Field(max_length=MAX_IMAGE_URL_LENGTH)
    keywords: list[str] = Field(
        default_factory=list,
        sa_type=KeywordList,  # type:ignore
    )
