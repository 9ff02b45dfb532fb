"""
语音渠道 - 把回复清洗成适合朗读的文本后交给语音后端播报。

【清洗规则】（按顺序）
1. URL                    → "URL omitted"
2. ``` 围起来的代码块       → "Code block omitted"（按行匹配开闭围栏）
3. **粗体** / *斜体* / `代码` → 只保留内部文字
4. [文字](链接)             → 文字

【异步说明】
播报在工作线程中进行（见 providers/speech.py），send() 会一直 await 到播报结束，
这是一轮对话中唯一的挂起点。指定音色失败会用默认音色重试，再失败则报告到
控制台和交互日志，但绝不向上抛出。
"""

import re

from loguru import logger
from rich.console import Console
from rich.markup import escape

from cliagent.agent.memory import InteractionLog
from cliagent.channels.base import BaseChannel
from cliagent.providers.speech import SpeechBackend, SpeechError, speak
from cliagent.session.state import SpeechSettings

_URL_RE = re.compile(r"https?://[^\s)]+")  # 不吞掉 Markdown 链接的右括号
_FENCE_RE = re.compile(r"^[ \t]*```[^\n]*\n.*?^[ \t]*```[^\n]*$", re.M | re.S)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_CODE_RE = re.compile(r"`([^`]*)`")
_LINK_RE = re.compile(r"\[(.*?)\]\(.*?\)")


def clean_for_speech(text: str) -> str:
    """
    去掉不适合朗读的内容（URL、代码块、Markdown 标记）。

    参数:
        text: 原始回复文本

    返回:
        适合语音播报的文本
    """
    text = _URL_RE.sub("URL omitted", text)
    text = _FENCE_RE.sub("Code block omitted", text)
    text = _BOLD_RE.sub(r"\1", text)
    text = _ITALIC_RE.sub(r"\1", text)
    text = _CODE_RE.sub(r"\1", text)
    text = _LINK_RE.sub(r"\1", text)
    return text.strip()


class VoiceChannel(BaseChannel):
    """
    语音输出渠道。

    属性:
        backend: 语音后端（默认 pyttsx3）
        console: 用于打印播报提示和错误的 rich 控制台
        log: 交互日志，播报失败时写入 ERROR 记录
    """

    name = "voice"

    def __init__(self, backend: SpeechBackend, console: Console, log: InteractionLog | None = None):
        self.backend = backend
        self.console = console
        self.log = log

    async def send(self, text: str, settings: SpeechSettings, title: str | None = None) -> None:
        spoken = clean_for_speech(text)
        if not spoken:
            return

        note = "Speaking response (voice only)..." if settings.output_mode == "voice" else "Speaking response..."
        self.console.print(f"[dim]🔊 {note}[/dim]")
        try:
            await speak(self.backend, spoken, settings.voice, settings.speed)
        except SpeechError as e:
            logger.error(f"Speech error: {e}")
            self.console.print(f"[red]Speech error: {escape(str(e))}[/red]")
            if self.log:
                self.log.log_error(f"Speech error: {e}")
