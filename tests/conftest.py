import pytest

from fastapi.testclient import TestClient

from newsfinder.config import Settings
from tests.mock_news_api import NEWS_API_SEARCH, make_response


@pytest.fixture
def settings():
    return Settings(news_api_key="test-key", _env_file=None)


@pytest.fixture
def mock_get(mocker):
    """Patched requests.get as seen by the news service."""
    return mocker.patch(
        "newsfinder.services.news.requests.get",
        return_value=make_response(json_data=NEWS_API_SEARCH),
    )


@pytest.fixture
def client(settings):
    """TestClient around an app built from the test settings."""
    from newsfinder.main import create_app
    return TestClient(create_app(settings))
