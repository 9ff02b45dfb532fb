"""
输出渠道模块 (channels)

- BaseChannel：输出渠道抽象基类
- ConsoleChannel：rich 终端文本输出
- VoiceChannel：清洗文本后交给语音后端播报
- OutputRouter：根据语音设置把内容分发到上述渠道，并写入交互日志
"""

from cliagent.channels.base import BaseChannel
from cliagent.channels.console import ConsoleChannel
from cliagent.channels.manager import OutputRouter
from cliagent.channels.voice import VoiceChannel, clean_for_speech

__all__ = ["BaseChannel", "ConsoleChannel", "OutputRouter", "VoiceChannel", "clean_for_speech"]
