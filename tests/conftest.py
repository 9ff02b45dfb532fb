"""Shared fixtures: fake speech backend, fake completion provider, isolated config."""
import io

import pytest
from rich.console import Console

from cliagent.agent.memory import InteractionLog
from cliagent.channels import ConsoleChannel, OutputRouter, VoiceChannel
from cliagent.config.schema import Config
from cliagent.providers.base import LLMProvider, LLMResponse
from cliagent.providers.speech import SpeechBackend, SpeechError
from cliagent.session import InteractionStore, SessionState, SpeechSettings


class FakeSpeechBackend(SpeechBackend):
    """Records every say() call; voices listed in failing_voices raise SpeechError."""

    def __init__(self, voices=None, failing_voices=(), fail_default=False):
        self.voices = ["Alex", "Samantha"] if voices is None else voices
        self.failing_voices = set(failing_voices)
        self.fail_default = fail_default
        self.calls = []

    def list_voices(self):
        return list(self.voices)

    def say(self, text, voice=None, speed=1.0):
        self.calls.append((text, voice, speed))
        if voice is None and self.fail_default:
            raise SpeechError("engine unavailable")
        if voice in self.failing_voices:
            raise SpeechError(f"Voice '{voice}' is not installed")


class FakeProvider(LLMProvider):
    """Returns queued replies; an Exception in the queue is raised instead."""

    def __init__(self, *replies):
        super().__init__()
        self.replies = list(replies)
        self.calls = []

    async def chat(self, messages, model=None):
        self.calls.append((messages, model))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply)


@pytest.fixture
def config(tmp_path):
    return Config(
        api_url="https://api.groq.com/openai/v1/chat/completions",
        api_key="gsk_test_key_1234567890",
        data_dir=str(tmp_path / "data"),
    )


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def speech_backend():
    return FakeSpeechBackend()


@pytest.fixture
def interaction_log(config):
    return InteractionLog(config.log_file)


@pytest.fixture
def router(console, speech_backend, interaction_log):
    return OutputRouter(
        ConsoleChannel(console, render_markdown=False),
        VoiceChannel(speech_backend, console, interaction_log),
        interaction_log,
    )


@pytest.fixture
def store(config):
    s = InteractionStore(config.memory_file)
    s.load()
    return s


@pytest.fixture
def state():
    return SessionState(model="llama3-70b-8192", speech=SpeechSettings())

