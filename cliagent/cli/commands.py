"""
CLI 命令模块 - cliagent 的所有命令行命令定义。

本模块使用 Typer 框架定义 cliagent 的 CLI 命令体系：
- agent：与 Agent 交互（单条消息或交互式对话）
- onboard：写入默认配置文件并创建数据目录
- tools：列出所有内置工具及其参数
- status：查看配置并测试与补全接口的连接

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出（Markdown 渲染、表格、状态动画等）
- prompt_toolkit：交互式输入（历史记录、行编辑）
"""

import asyncio
import os
import select
import signal
import sys
from pathlib import Path

import httpx
import typer
from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cliagent import __logo__, __version__
from cliagent.cli.shell import HELP_TEXT, CommandShell, ShellAction
from cliagent.config.loader import ConfigError, get_config_path, load_config, save_config, validate_config
from cliagent.config.schema import Config
from cliagent.utils.helpers import ensure_dir

# 创建 Typer 应用实例（CLI 根命令）
app = typer.Typer(
    name="cliagent",
    help=f"{__logo__} cliagent - Interactive command-line AI agent",
    no_args_is_help=True,
)

console = Console()

# ---------------------------------------------------------------------------
# CLI 输入：使用 prompt_toolkit 实现编辑、历史记录和显示
# ---------------------------------------------------------------------------

_PROMPT_SESSION: PromptSession | None = None
_SAVED_TERM_ATTRS = None  # 保存的终端原始属性（用于退出时恢复）


def _flush_pending_tty_input() -> None:
    """
    清除终端中未读的按键输入。

    Agent 处理（或播报）期间用户可能按了额外的键，这些残留输入会干扰下次读取。
    优先使用 termios.tcflush（POSIX），回退到 select+read 轮询。
    """
    try:
        fd = sys.stdin.fileno()
        if not os.isatty(fd):
            return
    except (OSError, ValueError):
        return

    try:
        import termios
        termios.tcflush(fd, termios.TCIFLUSH)
        return
    except (ImportError, OSError):
        pass

    try:
        while True:
            ready, _, _ = select.select([fd], [], [], 0)
            if not ready or not os.read(fd, 4096):
                break
    except (OSError, ValueError):
        return


def _restore_terminal() -> None:
    """恢复终端到原始状态（回显、行缓冲等）。"""
    if _SAVED_TERM_ATTRS is None:
        return
    try:
        import termios
        termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, _SAVED_TERM_ATTRS)
    except (ImportError, OSError):
        pass


def _init_prompt_session(data_path: Path) -> None:
    """
    创建 prompt_toolkit 会话，启用持久化文件历史记录。

    历史文件保存在 <data_dir>/history/cli_history，
    用户可以通过上/下方向键浏览之前输入过的命令。
    """
    global _PROMPT_SESSION, _SAVED_TERM_ATTRS

    try:
        import termios
        _SAVED_TERM_ATTRS = termios.tcgetattr(sys.stdin.fileno())
    except (ImportError, OSError, ValueError):
        pass

    history_file = data_path / "history" / "cli_history"
    history_file.parent.mkdir(parents=True, exist_ok=True)

    _PROMPT_SESSION = PromptSession(
        history=FileHistory(str(history_file)),
        enable_open_in_editor=False,
        multiline=False,
    )


async def _read_interactive_input_async() -> str:
    """使用 prompt_toolkit 异步读取一行输入，EOF 视为退出。"""
    if _PROMPT_SESSION is None:
        raise RuntimeError("Call _init_prompt_session() first")
    try:
        with patch_stdout():
            return await _PROMPT_SESSION.prompt_async(HTML(f"<b fg='ansiblue'>{__logo__} ></b> "))
    except EOFError as exc:
        raise KeyboardInterrupt from exc


def _configure_logging(verbose: bool) -> None:
    """把 loguru 输出到 stderr：--logs 时输出全部调试日志，否则只输出警告和错误。"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def version_callback(value: bool):
    """版本号回调：当用户传入 --version/-v 参数时，打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} cliagent v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """cliagent CLI 根命令回调。处理全局选项（如 --version）。"""
    pass


def _load_config(validate: bool = True) -> Config:
    """加载配置；配置错误时以红色打印并以退出码 1 结束。"""
    try:
        config = load_config()
        return validate_config(config) if validate else config
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        console.print("Set GROQ_API_URL and GROQ_API_KEY in the environment or a .env file.")
        raise typer.Exit(1)


def _make_provider(config: Config):
    """根据配置创建 LiteLLM 提供者实例。"""
    from cliagent.providers.litellm_provider import LiteLLMProvider
    return LiteLLMProvider(
        api_key=config.api_key or None,
        api_base=config.api_base or None,
        default_model=config.model,
    )


def _make_agent_loop(config: Config, render_markdown: bool = True):
    """组装 AgentLoop 及其依赖（会话状态、输出路由、交互记录）。"""
    from cliagent.agent.loop import AgentLoop
    from cliagent.agent.memory import InteractionLog
    from cliagent.channels import ConsoleChannel, OutputRouter, VoiceChannel
    from cliagent.providers.speech import Pyttsx3Backend
    from cliagent.session import InteractionStore, SessionState, SpeechSettings

    log = InteractionLog(config.log_file)
    backend = Pyttsx3Backend(config.speech.base_rate)
    router = OutputRouter(
        ConsoleChannel(console, render_markdown=render_markdown),
        VoiceChannel(backend, console, log),
        log,
    )
    store = InteractionStore(config.memory_file)
    store.load()

    state = SessionState(model=config.model, speech=SpeechSettings.from_config(config.speech))
    return AgentLoop(
        provider=_make_provider(config),
        config=config,
        state=state,
        router=router,
        store=store,
        speech_backend=backend,
    )


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """
    初始化 cliagent 配置文件和数据目录。

    执行流程：
    1. 在 ~/.cliagent/ 下写入 config.json（当前环境变量中的值也会一并写入）
    2. 创建数据目录及 logs/ 子目录
    3. 打印后续操作指引
    """
    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    config = Config()
    save_config(config, config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")

    ensure_dir(config.log_file.parent)
    console.print(f"[green]✓[/green] Created data dir at {config.data_path}")

    console.print(f"\n{__logo__} cliagent is ready!")
    console.print("\nNext steps:")
    console.print(f"  1. Set [cyan]apiUrl[/cyan] and [cyan]apiKey[/cyan] in [cyan]{config_path}[/cyan]")
    console.print("     (or export GROQ_API_URL / GROQ_API_KEY)")
    console.print("  2. Chat: [cyan]cliagent agent -m \"Hello!\"[/cyan]")


# ============================================================================
# Agent Commands
# ============================================================================


@app.command()
def agent(
    message: str = typer.Option(None, "--message", "-m", help="Message to send to the agent"),
    markdown: bool = typer.Option(True, "--markdown/--no-markdown", help="Render assistant output as Markdown"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show cliagent runtime logs during chat"),
    voice: bool = typer.Option(None, "--voice/--no-voice", help="Enable or disable voice output at startup"),
):
    """
    与 Agent 交互。

    支持两种使用方式：
    1. 单条消息模式：cliagent agent -m "What time is it?" → 处理一轮后退出
    2. 交互模式：cliagent agent → 进入交互式命令行（支持 setModel / voice 等本地命令）

    参数:
        message: 单条消息内容（指定后直接执行并退出）
        markdown: 是否以 Markdown 格式渲染输出
        logs: 是否显示运行时日志
        voice: 启动时是否启用语音（不指定则沿用配置）
    """
    _configure_logging(logs)
    config = _load_config()
    agent_loop = _make_agent_loop(config, render_markdown=markdown)
    if voice is not None:
        agent_loop.state.speech.enabled = voice

    # 日志关闭时显示思考动画；日志开启时跳过，避免与日志输出交错
    def _thinking_ctx():
        if logs:
            from contextlib import nullcontext
            return nullcontext()
        return console.status("[dim]cliagent is thinking...[/dim]", spinner="dots")

    if message:
        async def run_once():
            with _thinking_ctx():
                await agent_loop.process_direct(message)

        asyncio.run(run_once())
        return

    shell = CommandShell(agent_loop.state, agent_loop.tools, config, console)
    _init_prompt_session(config.data_path)
    console.print(f"{__logo__} Interactive AI Agent (type [bold]exit[/bold] or [bold]Ctrl+C[/bold] to quit)\n")
    console.print(HELP_TEXT, markup=False)
    console.print()

    def _exit_on_sigint(signum, frame):
        _restore_terminal()
        console.print("\n👋 Chat session ended.")
        os._exit(0)

    signal.signal(signal.SIGINT, _exit_on_sigint)

    async def run_interactive():
        while True:
            try:
                _flush_pending_tty_input()
                user_input = await _read_interactive_input_async()
                action = shell.handle(user_input)
                if action is ShellAction.EXIT:
                    break
                if action is ShellAction.HANDLED:
                    continue

                with _thinking_ctx():
                    await agent_loop.process_direct(user_input.strip())
            except (KeyboardInterrupt, EOFError):
                break
        _restore_terminal()
        console.print("\n👋 Chat session ended.")

    asyncio.run(run_interactive())


@app.command()
def tools():
    """列出所有内置工具（名称、位置参数、描述）。"""
    _configure_logging(False)
    config = _load_config(validate=False)
    agent_loop = _make_agent_loop(config)

    table = Table(title="🧰 Available tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Arguments")
    table.add_column("Description")

    for definition in agent_loop.tools.get_definitions():
        fn = definition["function"]
        params = fn.get("parameters") or {}
        required = set(params.get("required", []))
        args = ", ".join(p if p in required else f"{p}?" for p in params.get("properties", {}))
        table.add_row(fn["name"], args, fn.get("description", ""))

    console.print(table)


# ============================================================================
# Status
# ============================================================================


@app.command()
def status():
    """
    显示 cliagent 配置状态，并测试与补全接口的连接。

    展示内容：
    - 配置文件路径、数据目录
    - 接口地址、当前模型、语音设置
    - GET <api_base>/models 返回的可用模型列表
    """
    _configure_logging(False)
    config_path = get_config_path()
    config = _load_config()

    console.print(f"{__logo__} cliagent Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[dim]not found (using environment)[/dim]'}")
    console.print(f"Data dir: {config.data_path} {'[green]✓[/green]' if config.data_path.exists() else '[red]✗[/red]'}")
    console.print(f"API URL: {escape(config.api_url)}")
    console.print(f"Model: {escape(config.model)}")
    speech = config.speech
    console.print(f"Speech: {'enabled' if speech.enabled else 'disabled'} (mode: {speech.output_mode}, speed: {speech.speed})")
    console.print()

    try:
        with console.status("[dim]Testing connection...[/dim]", spinner="dots"):
            models = asyncio.run(_fetch_models(config))
    except httpx.HTTPError as e:
        console.print(f"[red]❌ Connection test failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ Connection successful[/green]")
    table = Table(title="Models available on the endpoint")
    table.add_column("Model", style="cyan")
    table.add_column("Owner")
    for item in models:
        table.add_row(str(item.get("id", "")), str(item.get("owned_by", "")))
    console.print(table)


async def _fetch_models(config: Config, transport: httpx.AsyncBaseTransport | None = None) -> list[dict]:
    """
    请求 <api_base>/models 并返回模型列表。

    异常:
        httpx.HTTPError: 网络错误或非 2xx 响应
    """
    async with httpx.AsyncClient(timeout=15.0, transport=transport) as client:
        r = await client.get(
            f"{config.api_base}/models",
            headers={"Authorization": f"Bearer {config.api_key}"},
        )
        r.raise_for_status()
    return r.json().get("data", [])


if __name__ == "__main__":
    app()
