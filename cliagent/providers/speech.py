"""
文字转语音（Text-to-Speech）提供者模块。

本模块把"把文本读出来"抽象成一个能力接口 SpeechBackend，
默认实现基于 pyttsx3（离线调用系统自带的 TTS 引擎：Windows SAPI5、macOS NSSpeech、Linux eSpeak）。

调用链路：
  VoiceChannel / speak 工具 → speak() → asyncio.to_thread(backend.say) → pyttsx3 → 扬声器

技术说明：
  - pyttsx3 的 runAndWait() 是阻塞调用，因此统一放到工作线程中执行，
    调用方通过 await 等待播报结束（或立即失败）后再继续
  - 指定音色失败时，speak() 会用系统默认音色重试一次，仍失败才抛出 SpeechError
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

# 1.0 倍速对应的 pyttsx3 语速（每分钟词数）
DEFAULT_BASE_RATE = 175


class SpeechError(RuntimeError):
    """语音引擎不可用、音色不存在或播报失败。"""


class SpeechBackend(ABC):
    """
    语音后端抽象基类。

    实现类只需提供两个同步方法：列出已安装音色、阻塞式播报一段文本。
    """

    @abstractmethod
    def list_voices(self) -> list[str]:
        """返回已安装的音色名称列表。失败时抛出 SpeechError。"""
        pass

    @abstractmethod
    def say(self, text: str, voice: str | None = None, speed: float = 1.0) -> None:
        """
        阻塞式播报文本，播报结束后返回。

        参数:
            text: 要播报的文本
            voice: 音色名称或 ID，None 表示系统默认
            speed: 语速倍率（0.5 ~ 2.0）

        异常:
            SpeechError: 引擎不可用、音色不存在或播报失败
        """
        pass


class Pyttsx3Backend(SpeechBackend):
    """
    基于 pyttsx3 的语音后端。

    每次调用都通过 pyttsx3.init() 获取引擎（pyttsx3 内部按驱动缓存引擎实例），
    这样引擎初始化失败不会影响程序启动，只会在真正需要播报时报告。
    """

    def __init__(self, base_rate: int = DEFAULT_BASE_RATE):
        self.base_rate = base_rate

    def _engine(self) -> Any:
        try:
            import pyttsx3  # 延迟导入，仅在需要播报时加载系统 TTS 驱动
            return pyttsx3.init()
        except Exception as e:
            raise SpeechError(f"TTS engine not available: {e}") from e

    def list_voices(self) -> list[str]:
        engine = self._engine()
        try:
            return [v.name for v in engine.getProperty("voices") or []]
        except Exception as e:
            raise SpeechError(f"Could not list voices: {e}") from e

    def say(self, text: str, voice: str | None = None, speed: float = 1.0) -> None:
        engine = self._engine()
        if voice:
            voice_id = self._find_voice(engine, voice)
            if voice_id is None:
                raise SpeechError(f"Voice '{voice}' is not installed")
            engine.setProperty("voice", voice_id)
        try:
            engine.setProperty("rate", int(self.base_rate * speed))
            engine.say(text)
            engine.runAndWait()
        except Exception as e:
            raise SpeechError(str(e)) from e

    @staticmethod
    def _find_voice(engine: Any, voice: str) -> str | None:
        """按 ID、名称精确匹配，再按名称不区分大小写的包含关系匹配。"""
        voices = engine.getProperty("voices") or []
        for v in voices:
            if voice in (v.id, v.name):
                return v.id
        lowered = voice.lower()
        for v in voices:
            if lowered in (v.name or "").lower():
                return v.id
        return None


async def speak(backend: SpeechBackend, text: str, voice: str | None = None, speed: float = 1.0) -> str | None:
    """
    在工作线程中播报文本，并等待播报结束。

    指定音色播报失败时，使用系统默认音色重试一次。

    参数:
        backend: 语音后端
        text: 要播报的文本
        voice: 音色，None 表示系统默认
        speed: 语速倍率

    返回:
        实际使用的音色（回退到默认音色时为 None）

    异常:
        SpeechError: 默认音色也播报失败
    """
    try:
        await asyncio.to_thread(backend.say, text, voice, speed)
        return voice
    except SpeechError as e:
        if voice is None:
            raise
        logger.warning(f"Speech with voice '{voice}' failed: {e}. Retrying with default voice")
        try:
            await asyncio.to_thread(backend.say, text, None, speed)
        except SpeechError as fallback_error:
            raise SpeechError(f"{e}. Fallback also failed: {fallback_error}") from fallback_error
        return None
