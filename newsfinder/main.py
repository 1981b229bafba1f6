import argparse
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from newsfinder.config import Settings, get_settings
from newsfinder.exceptions import AuthenticationError, IntegrationError, InvalidQueryError, RateLimitError
from newsfinder.logging_config import setup_logging
from newsfinder.routers.pages import INDEX_TEMPLATE, router as pages_router

logger = logging.getLogger(__name__)


def _server_error() -> PlainTextResponse:
    return PlainTextResponse("Internal server error", status_code=500)


# --- Exception handlers ---
# Every failure, including bad user input, is reported as a bare 500.

async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    logger.warning("Rejected search on %s: %s", request.url.path, exc)
    return _server_error()


async def upstream_error_handler(request: Request, exc: Exception):
    logger.warning("News API failure on %s: %s", request.url.path, exc)
    return _server_error()


async def render_error_handler(request: Request, exc: TemplateError):
    logger.error("Rendering %s failed: %s", INDEX_TEMPLATE, exc)
    return _server_error()


# --- FastAPI app ---

def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around an explicit Settings instance.

    The index template is loaded here, so a missing or broken template
    fails at startup instead of on the first request.
    """
    settings = settings or get_settings()
    templates = Jinja2Templates(directory=str(settings.templates_dir))
    templates.get_template(INDEX_TEMPLATE)

    app = FastAPI(title="newsfinder", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.templates = templates

    app.mount("/assets", StaticFiles(directory=settings.assets_dir), name="assets")
    app.include_router(pages_router)

    app.add_exception_handler(InvalidQueryError, invalid_query_handler)
    app.add_exception_handler(IntegrationError, upstream_error_handler)
    app.add_exception_handler(AuthenticationError, upstream_error_handler)
    app.add_exception_handler(RateLimitError, upstream_error_handler)
    app.add_exception_handler(TemplateError, render_error_handler)
    return app


# --- Command line ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newsfinder", description="Search news articles from newsapi.org.")
    parser.add_argument("-apikey", "--apikey", dest="apikey", default="", help="Newsapi.org access key")
    return parser


def run(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    if args.apikey:
        settings = settings.model_copy(update={"news_api_key": args.apikey})
    if not settings.news_api_key:
        parser.error("apiKey must be set")

    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
