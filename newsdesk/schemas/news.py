"""News table managed from the admin panel."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class NewsType(str, Enum):
    """Allowed values for ``News.type``."""

    BUSINESS = "Business"
    NATIONAL = "National"
    INTERNATIONAL = "International"


class News(SQLModel, table=True):  # type: ignore[call-arg]
    """A news link shown on the public site.

    ``type`` is stored as plain text (validated against ``NewsType`` by the
    form validator) so the search filter can run LIKE over it on every backend.
    """

    __tablename__ = "news"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str = Field(max_length=32, index=True)
    content_name: str = Field(max_length=255)
    content_url: str = Field(max_length=2048)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        index=True,
    )
