"""
输出路由模块 - 根据当前语音设置，把最终内容分发到控制台和/或语音渠道。

【路由规则】
1. 无论输出模式如何，先把 (prompt, text) 写入交互日志
2. output_mode 为 text / both            → 控制台渠道同步打印
3. output_mode 为 voice / both 且已启用语音 → 语音渠道播报（await 到播报结束）
4. 语音未启用时，voice 模式下什么也不会说（静默跳过）
5. output_mode 为 text 时，语音后端绝不会被调用

emit() 永远不会因为语音失败而抛出异常，失败由语音渠道自行报告。

【Java 开发者类比】
- OutputRouter 相当于一个简单的 MessageRouter，按配置把消息投递给多个 Handler
- report_error() 相当于统一的错误出口（控制台 + 错误日志）
"""

from loguru import logger
from rich.markup import escape

from cliagent.agent.memory import InteractionLog
from cliagent.channels.console import ConsoleChannel
from cliagent.channels.voice import VoiceChannel
from cliagent.session.state import SpeechSettings


class OutputRouter:
    """
    输出路由器。

    属性:
        console_channel: 控制台文本渠道
        voice_channel: 语音渠道
        log: 交互日志
    """

    def __init__(self, console_channel: ConsoleChannel, voice_channel: VoiceChannel, log: InteractionLog):
        self.console_channel = console_channel
        self.voice_channel = voice_channel
        self.log = log

    async def emit(
        self,
        prompt: str,
        text: str,
        settings: SpeechSettings,
        *,
        title: str | None = None,
        log_text: str | None = None,
    ) -> None:
        """
        呈现一段最终内容。

        参数:
            prompt: 本轮用户输入（写入交互日志）
            text: 要呈现的内容
            settings: 当前语音设置
            title: 可选的控制台标题
            log_text: 写入交互日志的回复文本，默认与 text 相同
        """
        self.log.log_interaction(prompt, text if log_text is None else log_text)

        if settings.wants_text:
            await self.console_channel.send(text, settings, title)

        if settings.wants_voice:
            await self.voice_channel.send(text, settings, title)
        elif settings.output_mode == "voice":
            logger.debug("Voice-only output selected but speech is disabled, nothing spoken")

    def report_error(self, message: str) -> None:
        """在控制台打印红色错误，并在交互日志中追加 ERROR 记录。"""
        logger.error(message)
        self.console_channel.console.print(f"[red]❌ {escape(message)}[/red]")
        self.log.log_error(message)
