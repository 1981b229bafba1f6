import pytest
from jinja2 import TemplateNotFound

from newsfinder import main
from newsfinder.config import Settings


@pytest.fixture
def no_env_key(monkeypatch, tmp_path):
    monkeypatch.delenv("NEWS_API_KEY", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_uvicorn(mocker):
    mocker.patch("newsfinder.main.setup_logging")
    return mocker.patch("newsfinder.main.uvicorn")


class TestRun:
    def test_missing_api_key_is_fatal(self, no_env_key, mock_uvicorn, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main.run([])
        assert exc_info.value.code != 0
        assert "apiKey must be set" in capsys.readouterr().err
        mock_uvicorn.run.assert_not_called()

    def test_empty_flag_is_fatal(self, no_env_key, mock_uvicorn):
        with pytest.raises(SystemExit):
            main.run(["-apikey", ""])
        mock_uvicorn.run.assert_not_called()

    def test_single_dash_flag(self, no_env_key, mock_uvicorn):
        main.run(["-apikey", "abc123"])
        app = mock_uvicorn.run.call_args.args[0]
        assert app.state.settings.news_api_key == "abc123"

    def test_double_dash_flag(self, no_env_key, mock_uvicorn):
        main.run(["--apikey", "abc123"])
        assert mock_uvicorn.run.call_args.args[0].state.settings.news_api_key == "abc123"

    def test_default_port(self, no_env_key, mock_uvicorn):
        main.run(["-apikey", "abc123"])
        assert mock_uvicorn.run.call_args.kwargs["port"] == 3000

    def test_port_from_env(self, no_env_key, mock_uvicorn, monkeypatch):
        monkeypatch.setenv("PORT", "8081")
        main.run(["-apikey", "abc123"])
        assert mock_uvicorn.run.call_args.kwargs["port"] == 8081

    def test_key_from_env(self, no_env_key, mock_uvicorn, monkeypatch):
        monkeypatch.setenv("NEWS_API_KEY", "from-env")
        main.run([])
        assert mock_uvicorn.run.call_args.args[0].state.settings.news_api_key == "from-env"

    def test_flag_overrides_env(self, no_env_key, mock_uvicorn, monkeypatch):
        monkeypatch.setenv("NEWS_API_KEY", "from-env")
        main.run(["-apikey", "from-flag"])
        assert mock_uvicorn.run.call_args.args[0].state.settings.news_api_key == "from-flag"


class TestCreateApp:
    def test_missing_template_fails_at_startup(self, tmp_path):
        settings = Settings(news_api_key="k", templates_dir=tmp_path, _env_file=None)
        with pytest.raises(TemplateNotFound):
            main.create_app(settings)

    def test_keeps_injected_settings(self, settings):
        app = main.create_app(settings)
        assert app.state.settings is settings
