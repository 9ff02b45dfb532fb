"""
语音工具模块 (agent/tools/speech.py)

模块职责：
    让模型可以直接调用语音能力：
      - GetVoicesTool: 列出已安装的音色，并附带调用示例
      - SpeakTool: 用指定音色和语速播报一段文本

    两者都依赖注入的 SpeechBackend（默认 pyttsx3），测试时可替换为假实现。
"""

import asyncio
import json
from typing import Any

from cliagent.agent.tools.base import Tool
from cliagent.providers.speech import SpeechBackend, SpeechError, speak
from cliagent.utils.helpers import truncate_string

PREVIEW_CHARS = 50


class GetVoicesTool(Tool):
    """列出可用音色（在工作线程中查询后端）。后端失败时返回描述性字符串而不是抛出异常。"""

    name = "getVoices"
    description = "List the text-to-speech voices installed on this system."
    parameters = {"type": "object", "properties": {}}

    def __init__(self, backend: SpeechBackend):
        self.backend = backend

    async def execute(self, **kwargs: Any) -> str:
        try:
            voices = await asyncio.to_thread(self.backend.list_voices)
        except SpeechError as e:
            return (f"Error getting voices: {e}\n\n"
                    'Try using voice null (default): { "tool": "speak", "args": ["Hello world", 1.0, null] }')

        if not voices:
            return 'No voices detected. Try using the default voice: { "tool": "speak", "args": ["Hello world"] }'

        example = json.dumps({"tool": "speak", "args": ["Hello world", 1.0, voices[0]]})
        return f"Available voices: {', '.join(voices)}\n\nTo use a voice, try: {example}"


class SpeakTool(Tool):
    """
    播报文本。

    指定音色失败时自动用默认音色重试一次；两次都失败则抛出 SpeechError，
    由调度器转换为 EXECUTION_ERROR。
    """

    name = "speak"
    description = "Speak text aloud. Optional speed (0.5-2.0, default 1.0) and voice name."
    parameters = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to speak", "minLength": 1},
            "speed": {"type": "number", "description": "Speech speed (0.5-2.0)", "minimum": 0.5, "maximum": 2.0},
            "voice": {"type": "string", "description": "Voice name (default: system voice)"}
        },
        "required": ["text"]
    }

    def __init__(self, backend: SpeechBackend):
        self.backend = backend

    async def execute(self, text: str, speed: float = 1.0, voice: str | None = None, **kwargs: Any) -> str:
        if not text.strip():
            raise ValueError("Text to speak must be a non-empty string")

        used = await speak(self.backend, text, voice, speed)
        preview = truncate_string(text, PREVIEW_CHARS)
        if voice and used is None:
            return f'Spoke with default voice: "{preview}" (speed: {speed})'
        return f'Spoke: "{preview}" ({used or "default voice"}, speed: {speed})'
