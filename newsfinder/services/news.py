import logging
import re

import requests
from pydantic import ValidationError

from newsfinder.config import Settings
from newsfinder.exceptions import AuthenticationError, IntegrationError, InvalidQueryError, RateLimitError
from newsfinder.models.news import Article, ArticleSource, PageContext, SearchQuery, SearchResult, total_pages

logger = logging.getLogger(__name__)

PAGE_SIZE = 20

_PAGE_RE = re.compile(r"[+-]?[0-9]+")


def parse_query(keyword: str, page: str) -> SearchQuery:
    """Build a SearchQuery from raw ``q`` and ``page`` query-string values.

    An empty page means the first page. Anything that is not a decimal
    integer of at least 1 raises InvalidQueryError.
    """
    page = page or "1"
    if not _PAGE_RE.fullmatch(page):
        raise InvalidQueryError(f"Page must be an integer, got {page!r}")
    try:
        number = int(page)
    except ValueError:
        # digit strings past the interpreter's int conversion limit
        raise InvalidQueryError("Page number is too long")
    if number < 1:
        raise InvalidQueryError(f"Page must be at least 1, got {number}")
    return SearchQuery(keyword=keyword, page=number)


def _search_params(query: SearchQuery, settings: Settings) -> dict:
    return {
        "q": query.keyword,
        "pageSize": PAGE_SIZE,
        "page": query.page,
        "apiKey": settings.news_api_key,
        "sortBy": "publishedAt",
        "language": "en",
    }


def build_search_url(query: SearchQuery, settings: Settings) -> str:
    """Full /everything URL for the query, with every parameter URL-escaped."""
    request = requests.Request(
        "GET",
        f"{settings.news_api_base}/everything",
        params=_search_params(query, settings),
    )
    return request.prepare().url


def _handle_response(resp: requests.Response) -> dict:
    if resp.status_code == 429:
        raise RateLimitError("News API rate limit exceeded.")
    if resp.status_code in (401, 403):
        raise AuthenticationError(f"News API rejected the key ({resp.status_code}).")
    if resp.status_code != 200:
        raise IntegrationError(f"News API error ({resp.status_code}): {resp.text[:200]}")
    try:
        data = resp.json()
    except ValueError as exc:
        raise IntegrationError(f"News API returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise IntegrationError("News API returned an unexpected JSON document.")
    if data.get("status") == "error":
        code = data.get("code", "")
        message = data.get("message", "")
        if code == "rateLimited":
            raise RateLimitError(f"News API rate limited: {message}")
        if code in ("apiKeyInvalid", "apiKeyDisabled", "apiKeyExhausted"):
            raise AuthenticationError(f"News API key error: {message}")
        raise IntegrationError(f"News API error: {code}: {message}")
    return data


def _parse_result(data: dict) -> SearchResult:
    try:
        articles = []
        for item in data.get("articles") or []:
            source = item.get("source") or {}
            articles.append(Article(
                source=ArticleSource(id=source.get("id"), name=source.get("name") or ""),
                author=item.get("author"),
                title=item.get("title") or "",
                description=item.get("description"),
                url=item.get("url") or "",
                image_url=item.get("urlToImage"),
                published_at=item.get("publishedAt"),
                content=item.get("content"),
            ))
        return SearchResult(
            status=data.get("status", ""),
            total_results=data.get("totalResults", 0),
            articles=articles,
        )
    except (AttributeError, TypeError, ValidationError) as exc:
        raise IntegrationError(f"News API response has an unexpected shape: {exc}") from exc


def search_articles(query: SearchQuery, settings: Settings) -> SearchResult:
    """Fetch one page of articles matching the keyword, newest first."""
    try:
        resp = requests.get(build_search_url(query, settings), timeout=settings.news_api_timeout)
    except requests.RequestException as exc:
        # the exception text can carry the full URL, key included
        raise IntegrationError(f"News API request failed: {type(exc).__name__}") from exc
    result = _parse_result(_handle_response(resp))
    logger.debug(
        "News API returned %d of %d results for page %d",
        len(result.articles), result.total_results, query.page,
    )
    return result


def search(query: SearchQuery, settings: Settings) -> PageContext:
    result = search_articles(query, settings)
    return PageContext(
        query=query,
        total_pages=total_pages(result.total_results, PAGE_SIZE),
        result=result,
    )
