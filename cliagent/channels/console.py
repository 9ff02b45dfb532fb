"""
控制台渠道 - 用 rich 把回复渲染到终端。

支持 Markdown 与纯文本两种渲染方式（由 --markdown/--no-markdown 控制）。
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from cliagent import __logo__
from cliagent.channels.base import BaseChannel
from cliagent.session.state import SpeechSettings

DEFAULT_TITLE = f"{__logo__} Response"


class ConsoleChannel(BaseChannel):
    """
    终端文本输出渠道。

    属性:
        console: rich 控制台实例
        render_markdown: 是否按 Markdown 渲染
    """

    name = "console"

    def __init__(self, console: Console | None = None, render_markdown: bool = True):
        self.console = console or Console()
        self.render_markdown = render_markdown

    async def send(self, text: str, settings: SpeechSettings, title: str | None = None) -> None:
        content = text or ""
        body = Markdown(content) if self.render_markdown else Text(content)
        self.console.print()
        self.console.print(Text(title or DEFAULT_TITLE, style="cyan"))
        self.console.print(body)
        self.console.print()
