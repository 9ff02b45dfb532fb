"""
提供者模块 (providers)

本模块封装了 cliagent 依赖的两类外部能力：
- LLM 补全接口：LLMProvider 抽象基类 + LiteLLMProvider 实现
- 文字转语音：SpeechBackend 抽象基类 + Pyttsx3Backend 实现

上层代码（AgentLoop、输出渠道、语音工具）只依赖抽象接口，便于测试时替换。
"""

from cliagent.providers.base import CompletionError, LLMProvider, LLMResponse
from cliagent.providers.litellm_provider import LiteLLMProvider
from cliagent.providers.speech import Pyttsx3Backend, SpeechBackend, SpeechError

__all__ = [
    "CompletionError",
    "LLMProvider",
    "LLMResponse",
    "LiteLLMProvider",
    "Pyttsx3Backend",
    "SpeechBackend",
    "SpeechError",
]
