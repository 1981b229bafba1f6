from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from newsfinder.config import Settings
from newsfinder.models.news import PageContext
from newsfinder.services import news as news_service

INDEX_TEMPLATE = "index.html"

router = APIRouter(tags=["pages"])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def _render(request: Request, templates: Jinja2Templates, page: PageContext | None) -> HTMLResponse:
    return templates.TemplateResponse(request, INDEX_TEMPLATE, {"page": page})


@router.get("/", response_class=HTMLResponse)
def index(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return _render(request, templates, None)


@router.get("/search", response_class=HTMLResponse)
def search(
    request: Request,
    q: str = "",
    page: str = "1",
    settings: Settings = Depends(get_app_settings),
    templates: Jinja2Templates = Depends(get_templates),
):
    query = news_service.parse_query(q, page)
    return _render(request, templates, news_service.search(query, settings))
