"""Unit tests for settings and runtime assembly."""

import pytest
from a2a.types import TaskState
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage

from reactAgent.config import Settings, resolve_project_path
from reactAgent.executor import ExecutionRequest
from reactAgent.protocol import InMemoryEventBus, message_text
from reactAgent.runtime import build_executor, load_mcp_servers
from reactAgent.runtime.app import _chat_kwargs


class ToolCallingFakeModel(GenericFakeChatModel):
    def bind_tools(self, tools, **kwargs):
        return self


@pytest.fixture
def settings(monkeypatch, tmp_path):
    for name in ("MODEL_CHAT", "MODEL_CHAT_ID", "OPENAI_MODEL", "MODEL_CHAT_BASE_URL", "MODEL_CHAT_URL",
                 "OPENAI_BASE_URL", "MODEL_CHAT_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MCP_ENABLED", "false")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))

    def build(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Settings()

    return build


class TestSettings:

    def test_defaults(self, settings):
        s = settings()

        assert s.models.chat == "gpt-4o-mini"
        assert s.models.temperature == 0.0
        assert s.executor.serialize_conversations is True
        assert s.executor.recursion_limit == 25
        assert s.mcp.enabled is False

    def test_openai_aliases(self, settings):
        s = settings(OPENAI_MODEL="gpt-4.1", OPENAI_API_KEY="sk-test", OPENAI_BASE_URL="http://localhost:4000/v1")

        assert s.models.chat == "gpt-4.1"
        assert s.models.chat_api_key == "sk-test"
        assert s.models.chat_base_url == "http://localhost:4000/v1"

    def test_executor_overrides(self, settings):
        s = settings(EXECUTOR_SERIALIZE_CONVERSATIONS="false", EXECUTOR_RECURSION_LIMIT="50")

        assert s.executor.serialize_conversations is False
        assert s.executor.recursion_limit == 50

    def test_resolve_project_path(self, tmp_path):
        assert resolve_project_path(tmp_path) == tmp_path
        assert resolve_project_path("reactAgent/config").is_dir()


class TestChatModel:

    def test_missing_api_key(self, settings):
        with pytest.raises(RuntimeError, match="Missing API key"):
            _chat_kwargs(settings())

    def test_kwargs(self, settings):
        kwargs = _chat_kwargs(settings(MODEL_CHAT_API_KEY="sk-test", MODEL_CHAT_BASE_URL="http://proxy/v1"))

        assert kwargs == {
            "model": "gpt-4o-mini",
            "api_key": "sk-test",
            "temperature": 0.0,
            "base_url": "http://proxy/v1",
        }


class TestMCPServers:

    def test_disabled(self, settings):
        assert load_mcp_servers(settings()) == {"servers": {}, "settings": {}}

    def test_missing_file_degrades(self, settings, tmp_path):
        s = settings(MCP_ENABLED="true", MCP_CONFIG_PATH=str(tmp_path / "missing.yaml"))
        assert load_mcp_servers(s) == {"servers": {}, "settings": {}}

    def test_invalid_yaml_degrades(self, settings, tmp_path):
        path = tmp_path / "mcp.yaml"
        path.write_text("servers: [unclosed\n", encoding="utf-8")

        s = settings(MCP_ENABLED="true", MCP_CONFIG_PATH=str(path))

        assert load_mcp_servers(s) == {"servers": {}, "settings": {}}

    def test_loads_file(self, settings, tmp_path):
        path = tmp_path / "mcp.yaml"
        path.write_text("servers:\n  files:\n    command: files-server\n", encoding="utf-8")

        config = load_mcp_servers(settings(MCP_ENABLED="true", MCP_CONFIG_PATH=str(path)))

        assert config["servers"]["files"]["command"] == "files-server"


@pytest.mark.asyncio
async def test_build_executor_end_to_end(settings, make_message):
    model = ToolCallingFakeModel(messages=iter([AIMessage(content="Hello! How can I help?")]))
    executor = await build_executor(settings=settings(EXECUTOR_RECURSION_LIMIT="10"), model=model)
    bus = InMemoryEventBus()

    try:
        await executor.execute(ExecutionRequest(make_message("hi")), bus)
    finally:
        await executor.cleanup()

    final = bus.final_event
    assert final.status.state == TaskState.completed
    assert message_text(final.status.message) == "Hello! How can I help?"
    assert executor.adapter.initialized
    assert executor.adapter.recursion_limit == 10
    assert len(executor.conversations.get(final.context_id)) == 2
