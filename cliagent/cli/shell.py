"""
交互式命令解析模块 - 在把输入交给 Agent 之前，先识别本地命令。

支持的命令（关键字不区分大小写）：
    exit / quit / /exit / /quit / :q     退出
    setModel <model>                     切换模型（必须在 available_models 中）
    listTools                            列出已注册工具
    listModels                           列出可用模型（标记当前模型）
    help                                 显示帮助
    voice on | off                       启用 / 关闭语音输出
    voice male | female                  使用预设音色并启用语音
    voice use <name>                     使用指定音色并启用语音
    voice mode <text|voice|both>         设置输出模式
    voice speed <0.5-2.0>                设置语速
    voice info                           显示当前语音设置

不是上述命令的输入原样交给 Agent 处理。

【Java 开发者类比】
CommandShell.handle() 相当于一个命令分发器（Command Pattern），
返回值 ShellAction 告诉调用方是退出、已处理，还是交给 Agent。
"""

from enum import Enum

from rich.console import Console
from rich.markup import escape

from cliagent.agent.tools.registry import ToolRegistry
from cliagent.config.schema import Config
from cliagent.session.state import OUTPUT_MODES, SessionState

EXIT_COMMANDS = {"exit", "quit", "/exit", "/quit", ":q"}

HELP_TEXT = """Available commands:
  - exit: Quit the application
  - setModel <model>: Change the AI model
  - listTools: Show available tools
  - listModels: Show available AI models
  - help: Show this help
  - voice on/off: Enable/disable voice output
  - voice male: Use male voice preset
  - voice female: Use female voice preset
  - voice use <name>: Use specific voice
  - voice mode <text|voice|both>: Set output mode
  - voice speed <0.5-2.0>: Set voice speed
  - voice info: Show current voice settings"""


class ShellAction(str, Enum):
    """命令处理结果。"""

    EXIT = "exit"
    HANDLED = "handled"
    PASS = "pass"  # 不是本地命令，交给 Agent


class CommandShell:
    """
    本地命令处理器。

    属性:
        state: 会话状态（命令会原地修改它）
        registry: 工具注册表（listTools 使用）
        config: 全局配置（可用模型列表、预设音色）
        console: rich 控制台
    """

    def __init__(self, state: SessionState, registry: ToolRegistry, config: Config, console: Console):
        self.state = state
        self.registry = registry
        self.config = config
        self.console = console

    def handle(self, line: str) -> ShellAction:
        """
        处理一行输入。

        参数:
            line: 用户输入的一整行

        返回:
            ShellAction: EXIT / HANDLED / PASS
        """
        text = line.strip()
        lowered = text.lower()
        if not text:
            return ShellAction.HANDLED
        if lowered in EXIT_COMMANDS:
            return ShellAction.EXIT

        keyword, _, rest = text.partition(" ")
        keyword = keyword.lower()

        if keyword == "setmodel":
            self._set_model(rest.strip())
            return ShellAction.HANDLED
        if lowered == "listtools":
            self._list_tools()
            return ShellAction.HANDLED
        if lowered == "listmodels":
            self._list_models()
            return ShellAction.HANDLED
        if lowered == "help":
            self.console.print(HELP_TEXT, markup=False)
            return ShellAction.HANDLED
        if keyword == "voice":
            return self._voice(rest.strip())
        return ShellAction.PASS

    def _set_model(self, name: str) -> None:
        model = name.split(" ")[0] if name else ""
        if not model:
            self.console.print("[yellow]⚠️ Please provide a model name. Usage: setModel llama3-8b-8192[/yellow]")
            self.console.print("Use 'listModels' to see available models.")
            return
        if model not in self.config.available_models:
            self.console.print(f"[red]❌ Model '{escape(model)}' is not available.[/red]")
            self.console.print(f"Available models: {', '.join(self.config.available_models)}")
            return
        self.state.model = model
        self.console.print(f"[green]✅ Model switched to: {escape(model)}[/green]")

    def _list_tools(self) -> None:
        self.console.print("🧰 Available tools:")
        for name in self.registry.tool_names:
            self.console.print(f"- {escape(name)}")

    def _list_models(self) -> None:
        self.console.print("🤖 Available models:")
        for model in self.config.available_models:
            marker = " [cyan](current)[/cyan]" if model == self.state.model else ""
            self.console.print(f"- {escape(model)}{marker}")

    def _voice(self, args: str) -> ShellAction:
        """处理 voice 子命令；无法识别的子命令交给 Agent。"""
        speech = self.state.speech
        sub, _, value = args.partition(" ")
        sub, value = sub.lower(), value.strip()

        if sub == "on" and not value:
            speech.enabled = True
            self.console.print("🔊 Voice output enabled")
        elif sub == "off" and not value:
            speech.enabled = False
            self.console.print("🔇 Voice output disabled")
        elif sub in ("male", "female") and not value:
            preset = self.config.speech.male_voice if sub == "male" else self.config.speech.female_voice
            speech.use_voice(preset)
            self.console.print(f"🔊 Voice set to {sub} ({escape(preset)}) and enabled")
        elif sub == "use":
            if value:
                speech.use_voice(value)
                self.console.print(f'🔊 Voice set to "{escape(value)}" and enabled')
            else:
                self.console.print("[yellow]⚠️ Please provide a voice name. Example: voice use Microsoft David Desktop[/yellow]")
        elif sub == "mode":
            mode = value.lower()
            if speech.set_mode(mode):
                self.console.print(f"[green]✅ Output mode set to: {mode}[/green]")
            else:
                modes = ", ".join(f"'{m}'" for m in OUTPUT_MODES)
                self.console.print(f"[yellow]⚠️ Invalid mode. Use {modes}[/yellow]")
        elif sub == "speed":
            try:
                speed = float(value)
            except ValueError:
                speed = None
            if speed is not None and speech.set_speed(speed):
                self.console.print(f"[green]✅ Voice speed set to: {speed}[/green]")
            else:
                self.console.print("[yellow]⚠️ Invalid speed. Use a value between 0.5 and 2.0[/yellow]")
        elif sub == "info" and not value:
            self.console.print("🔊 Voice settings:")
            self.console.print(f"- Enabled: {'Yes' if speech.enabled else 'No'}")
            self.console.print(f"- Output mode: {speech.output_mode}")
            self.console.print(f"- Speed: {speech.speed}")
            self.console.print(f"- Voice: {escape(speech.voice or 'System default')}")
        else:
            return ShellAction.PASS
        return ShellAction.HANDLED
