"""Tests for agent/tools/filesystem.py: sandboxed text file tools."""
import os

import pytest

from cliagent.agent.classifier import ToolCallRequest
from cliagent.agent.dispatcher import ToolDispatcher
from cliagent.agent.tools.base import ErrorKind
from cliagent.agent.tools.filesystem import ReadTextFileTool, WriteTextFileTool
from cliagent.agent.tools.registry import ToolRegistry


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    root = tmp_path / "work"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_write_then_read(self, workdir):
        content = "line one\nline two ✓\n"
        message = await WriteTextFileTool().execute("notes/a.txt", content)
        assert message == "File 'notes/a.txt' written successfully"
        assert (workdir / "notes" / "a.txt").read_text(encoding="utf-8") == content
        assert await ReadTextFileTool().execute("notes/a.txt") == content

    @pytest.mark.asyncio
    async def test_missing_file(self, workdir):
        with pytest.raises(FileNotFoundError, match="File 'nope.txt' not found"):
            await ReadTextFileTool().execute("nope.txt")

    @pytest.mark.asyncio
    async def test_configured_root(self, tmp_path, workdir):
        other = tmp_path / "elsewhere"
        other.mkdir()
        await WriteTextFileTool(allowed_dir=other).execute("x.txt", "hi")
        assert (other / "x.txt").read_text() == "hi"
        assert not (workdir / "x.txt").exists()


class TestSandbox:
    @pytest.mark.asyncio
    async def test_parent_escape_denied(self, tmp_path, workdir):
        with pytest.raises(PermissionError, match="Access denied"):
            await WriteTextFileTool().execute("../escape.txt", "nope")
        assert not (tmp_path / "escape.txt").exists()

    @pytest.mark.asyncio
    async def test_absolute_path_outside_denied(self, tmp_path, workdir):
        secret = tmp_path / "secret.txt"
        secret.write_text("top secret")
        with pytest.raises(PermissionError):
            await ReadTextFileTool().execute(str(secret))

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    async def test_symlink_escape_denied(self, tmp_path, workdir):
        outside = tmp_path / "outside.txt"
        outside.write_text("outside")
        (workdir / "link.txt").symlink_to(outside)
        with pytest.raises(PermissionError):
            await ReadTextFileTool().execute("link.txt")

    @pytest.mark.asyncio
    async def test_dispatcher_reports_access_denied(self, workdir):
        registry = ToolRegistry()
        registry.register(ReadTextFileTool())
        result = await ToolDispatcher(registry).dispatch(ToolCallRequest("readTextFile", ["../../etc/passwd"]))
        assert result.error is ErrorKind.EXECUTION_ERROR
        assert "Access denied" in result.message
