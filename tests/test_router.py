"""Tests for channels/: output routing and speech text cleaning."""
import pytest

from cliagent.channels import clean_for_speech
from cliagent.session import SpeechSettings


class TestCleanForSpeech:
    def test_urls_omitted(self):
        assert clean_for_speech("See https://example.com/page now") == "See URL omitted now"

    def test_fenced_code_block_omitted(self):
        text = "Here:\n```python\nprint('hi')\n```\nDone."
        assert clean_for_speech(text) == "Here:\nCode block omitted\nDone."

    def test_markdown_emphasis_removed(self):
        assert clean_for_speech("**bold** and *italic* and `code`") == "bold and italic and code"

    def test_links_keep_label(self):
        assert clean_for_speech("Read [the docs](https://docs.example.com)") == "Read the docs"


class TestEmit:
    @pytest.mark.asyncio
    async def test_text_mode_never_speaks(self, router, speech_backend, console):
        settings = SpeechSettings(enabled=True, output_mode="text")
        await router.emit("hi", "Hello!", settings)
        assert speech_backend.calls == []
        assert "Hello!" in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_both_mode_prints_and_speaks(self, router, speech_backend, console):
        settings = SpeechSettings(enabled=True, output_mode="both", voice="Alex", speed=1.5)
        await router.emit("hi", "Hello **there**", settings)
        assert "Hello" in console.file.getvalue()
        assert speech_backend.calls == [("Hello there", "Alex", 1.5)]

    @pytest.mark.asyncio
    async def test_voice_mode_skips_console_body(self, router, speech_backend, console):
        settings = SpeechSettings(enabled=True, output_mode="voice")
        await router.emit("hi", "Only spoken", settings)
        assert "Only spoken" not in console.file.getvalue()
        assert speech_backend.calls == [("Only spoken", None, 1.0)]

    @pytest.mark.asyncio
    async def test_disabled_speech_is_silent(self, router, speech_backend, console):
        settings = SpeechSettings(enabled=False, output_mode="voice")
        await router.emit("hi", "Nothing", settings)
        assert speech_backend.calls == []
        assert "Nothing" not in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_interaction_logged_first(self, router, config):
        await router.emit("question", "answer", SpeechSettings(output_mode="text"))
        log = config.log_file.read_text(encoding="utf-8")
        assert "] User: question\nResponse: answer\n\n" in log

    @pytest.mark.asyncio
    async def test_custom_log_text_and_title(self, router, config, console):
        await router.emit(
            "add", "Tool add executed. The result is: 5", SpeechSettings(),
            title="🔧 Tool [add]", log_text="Tool used: add, Result: 5",
        )
        assert "🔧 Tool [add]" in console.file.getvalue()
        assert "Response: Tool used: add, Result: 5" in config.log_file.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_speech_failure_is_reported_not_raised(self, router, speech_backend, console, config):
        speech_backend.failing_voices = {"Ghost"}
        speech_backend.fail_default = True
        settings = SpeechSettings(enabled=True, output_mode="both", voice="Ghost")
        await router.emit("hi", "Hello", settings)
        assert "Speech error" in console.file.getvalue()
        assert "ERROR: Speech error" in config.log_file.read_text(encoding="utf-8")


class TestReportError:
    def test_console_and_log(self, router, console, config):
        router.report_error("Agent Error: boom [x]")
        assert "Agent Error: boom [x]" in console.file.getvalue()
        assert "] ERROR: Agent Error: boom [x]\n\n" in config.log_file.read_text(encoding="utf-8")
