"""Non-table models used by the admin news views."""

from typing import Optional

from sqlmodel import SQLModel

from newsdesk.schemas.news import News


class NewsActionResponse(SQLModel):
    """JSON body returned by non-navigational news actions (delete)."""

    success: bool
    message: str


class NewsFormData(SQLModel):
    """Values shown in the add/edit form."""

    id: Optional[int] = None
    type: str = ""
    content_name: str = ""
    content_url: str = ""

    @classmethod
    def from_news(cls, item: News) -> "NewsFormData":
        return cls(
            id=item.id,
            type=item.type,
            content_name=item.content_name,
            content_url=item.content_url,
        )

    def merged_with(
        self,
        news_type: Optional[str],
        content_name: Optional[str],
        content_url: Optional[str],
    ) -> "NewsFormData":
        """Overlay submitted values; blanks keep what is stored."""
        return NewsFormData(
            id=self.id,
            type=news_type or self.type,
            content_name=content_name or self.content_name,
            content_url=content_url or self.content_url,
        )
