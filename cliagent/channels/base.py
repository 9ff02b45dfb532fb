"""
渠道基类模块 - 定义所有输出渠道的统一接口。

本模块提供了 BaseChannel 抽象基类，具体渠道（控制台文本、语音）
都必须继承此基类并实现 send()。这是"策略模式"（Strategy Pattern）的典型应用：
OutputRouter 根据当前语音设置决定调用哪些渠道。

【Java 开发者类比】
- BaseChannel 相当于 Java 的 interface OutputChannel { void send(...); }
- ConsoleChannel / VoiceChannel 是两个实现类
"""

from abc import ABC, abstractmethod

from cliagent.session.state import SpeechSettings


class BaseChannel(ABC):
    """
    输出渠道抽象基类。

    属性:
        name: 渠道标识名（如 "console"、"voice"）
    """

    name: str = "base"

    @abstractmethod
    async def send(self, text: str, settings: SpeechSettings, title: str | None = None) -> None:
        """
        把一段最终内容呈现给用户。

        参数:
            text: 要呈现的文本
            settings: 当前语音设置（音色、语速、输出模式）
            title: 可选的标题（如工具调用结果的 "🔧 Tool [add]"）
        """
        pass
