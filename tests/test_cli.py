"""Tests for cli/commands.py: typer commands and the models endpoint check."""
import json

import httpx
import pytest
from loguru import logger
from typer.testing import CliRunner

from cliagent import __version__
from cliagent.cli import commands
from cliagent.config.loader import load_config
from cliagent.config.schema import Config

from conftest import FakeProvider

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()


@pytest.fixture
def use_config(monkeypatch):
    def _use(config):
        monkeypatch.setattr(commands, "load_config", lambda config_path=None: config)
    return _use


class TestCommands:
    def test_version(self):
        result = runner.invoke(commands.app, ["--version"])
        assert result.exit_code == 0
        assert f"cliagent v{__version__}" in result.stdout

    def test_tools_lists_builtin_tools(self, config, use_config):
        use_config(config)
        result = runner.invoke(commands.app, ["tools"])
        assert result.exit_code == 0
        assert "getTime" in result.stdout

    def test_agent_refuses_to_start_without_credentials(self, tmp_path, use_config):
        use_config(Config(api_url="", api_key="", data_dir=str(tmp_path)))
        result = runner.invoke(commands.app, ["agent", "-m", "hi"])
        assert result.exit_code == 1
        assert "GROQ_API_URL" in result.stdout

    def test_agent_single_message(self, config, use_config, monkeypatch):
        use_config(config)
        monkeypatch.setattr(commands, "_make_provider", lambda cfg: FakeProvider('{"tool": "add", "args": [20, 22]}'))
        result = runner.invoke(commands.app, ["agent", "-m", "20 + 22?", "--no-markdown"])
        assert result.exit_code == 0
        assert "Tool add executed. The result is: 42" in result.stdout
        assert config.memory_file.exists()


class TestFetchModels:
    @pytest.mark.asyncio
    async def test_lists_models_with_bearer_auth(self, config):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"data": [{"id": "llama3-70b-8192", "owned_by": "Meta"}]})

        models = await commands._fetch_models(config, transport=httpx.MockTransport(handler))

        assert models == [{"id": "llama3-70b-8192", "owned_by": "Meta"}]
        assert seen["url"] == "https://api.groq.com/openai/v1/models"
        assert seen["auth"] == "Bearer gsk_test_key_1234567890"

    @pytest.mark.asyncio
    async def test_rejected_key_raises(self, config):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "invalid"}))
        with pytest.raises(httpx.HTTPStatusError):
            await commands._fetch_models(config, transport=transport)


class TestOnboard:
    @pytest.fixture
    def paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in ("GROQ_API_URL", "GROQ_API_KEY", "GROQ_MODEL"):
            monkeypatch.delenv(name, raising=False)
        config_path = tmp_path / "home" / "config.json"
        data_dir = tmp_path / "data"
        monkeypatch.setattr(commands, "get_config_path", lambda: config_path)
        monkeypatch.setenv("CLIAGENT_DATA_DIR", str(data_dir))
        return config_path, data_dir

    def test_writes_camel_case_config_and_data_dir(self, paths):
        config_path, data_dir = paths
        result = runner.invoke(commands.app, ["onboard"])

        assert result.exit_code == 0
        data = json.loads(config_path.read_text(encoding="utf-8"))
        assert data["model"] == "llama3-70b-8192"
        assert data["speech"]["outputMode"] == "both"
        assert data["tools"]["web"]["fetchMaxChars"] == 1000
        assert (data_dir / "logs").is_dir()

    def test_written_config_loads_back(self, paths):
        config_path, _ = paths
        runner.invoke(commands.app, ["onboard"])
        assert load_config(config_path).speech.output_mode == "both"

    def test_keeps_existing_config_unless_confirmed(self, paths):
        config_path, _ = paths
        config_path.parent.mkdir(parents=True)
        config_path.write_text('{"model": "gemma2-9b-it"}')

        result = runner.invoke(commands.app, ["onboard"], input="n\n")

        assert result.exit_code == 0
        assert json.loads(config_path.read_text()) == {"model": "gemma2-9b-it"}
