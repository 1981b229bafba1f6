import math
from datetime import datetime

from pydantic import BaseModel, Field


class SearchQuery(BaseModel):
    keyword: str = ""
    page: int = Field(default=1, ge=1)


class ArticleSource(BaseModel):
    model_config = {"frozen": True}

    id: str | None = None
    name: str = ""


class Article(BaseModel):
    model_config = {"frozen": True}

    source: ArticleSource
    author: str | None = None
    title: str = ""
    description: str | None = None
    url: str = ""
    image_url: str | None = None
    published_at: datetime
    content: str | None = None

    @property
    def formatted_published_date(self) -> str:
        """Publish date as "<Month> <day> <year>", e.g. "March 5 2021"."""
        published = self.published_at
        return f"{published.strftime('%B')} {published.day} {published.year}"


class SearchResult(BaseModel):
    status: str
    total_results: int
    articles: list[Article]


def total_pages(total_results: int, page_size: int) -> int:
    return math.ceil(total_results / page_size)


class PageContext(BaseModel):
    query: SearchQuery
    total_pages: int
    result: SearchResult

    @property
    def previous_page(self) -> int | None:
        if self.query.page <= 1 or self.total_pages < 1:
            return None
        # past the end, step back to the last real page
        return min(self.query.page - 1, self.total_pages)

    @property
    def next_page(self) -> int | None:
        if self.is_last_page:
            return None
        return self.query.page + 1

    @property
    def is_last_page(self) -> bool:
        return self.query.page >= self.total_pages
