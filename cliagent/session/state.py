"""
会话状态模块 - 当前进程的运行期设置（模型 + 语音输出）。

SessionState 显式地在 CLI、AgentLoop 与 OutputRouter 之间传递，
代替散落在各处的全局可变变量。它在启动时由配置初始化，
运行期由 `setModel` / `voice ...` 命令原地修改，进程退出后不持久化。
"""

from dataclasses import dataclass, field
from typing import Literal

from cliagent.config.schema import SpeechConfig

OutputMode = Literal["text", "voice", "both"]
OUTPUT_MODES: tuple[str, ...] = ("text", "voice", "both")

MIN_SPEED = 0.5
MAX_SPEED = 2.0


@dataclass
class SpeechSettings:
    """
    语音输出设置。

    属性:
        enabled: 是否启用语音输出
        output_mode: 输出模式（text=仅文本, voice=仅语音, both=文本+语音）
        voice: 音色名称，None 表示系统默认
        speed: 语速倍率，始终位于 [0.5, 2.0]
    """

    enabled: bool = False
    output_mode: OutputMode = "both"
    voice: str | None = None
    speed: float = 1.0

    @classmethod
    def from_config(cls, config: SpeechConfig) -> "SpeechSettings":
        return cls(
            enabled=config.enabled,
            output_mode=config.output_mode,
            voice=config.voice,
            speed=config.speed,
        )

    @property
    def wants_text(self) -> bool:
        """当前模式是否需要文本输出。"""
        return self.output_mode in ("text", "both")

    @property
    def wants_voice(self) -> bool:
        """当前模式是否需要语音输出（且语音已启用）。"""
        return self.enabled and self.output_mode in ("voice", "both")

    def set_mode(self, mode: str) -> bool:
        """设置输出模式，非法值返回 False 且不修改。"""
        if mode not in OUTPUT_MODES:
            return False
        self.output_mode = mode  # type: ignore[assignment]
        return True

    def set_speed(self, speed: float) -> bool:
        """设置语速，超出 [0.5, 2.0] 返回 False 且不修改。"""
        if not MIN_SPEED <= speed <= MAX_SPEED:
            return False
        self.speed = speed
        return True

    def use_voice(self, voice: str) -> None:
        """选择音色并自动启用语音输出。"""
        self.voice = voice
        self.enabled = True


@dataclass
class SessionState:
    """当前会话的运行期状态：正在使用的模型 + 语音设置。"""

    model: str
    speech: SpeechSettings = field(default_factory=SpeechSettings)
