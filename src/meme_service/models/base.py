from datetime import datetime, timezone

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TsBase(SQLModel):
    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # type:ignore
    )


class IdBase(TsBase):
    id: int | None = Field(default=None, primary_key=True)
