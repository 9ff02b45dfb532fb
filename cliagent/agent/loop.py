"""
Agent 主循环模块 —— cliagent 的核心处理引擎。

一轮对话的完整流水线：
  用户输入 → 上下文构建 → 补全接口 → 交互记录落盘 → 回复分类 → {工具调度 → 输出路由} 或 {输出路由}

与多轮 ReAct 循环不同，这里每轮最多执行一次工具调用，工具结果直接呈现给用户，
不会再回传给模型。

错误处理：
  - 补全失败（CompletionError）：报告 "Agent Error: ..."，本轮结束
  - 交互记录保存失败：报告 "Error saving memory: ..."，本轮继续
  - 工具失败（ToolResult 失败）：报告 "Tool execution error: ..."
  - 其他意外异常：在循环边界捕获并报告，交互式命令行继续运行

【Java 开发者类比】
- AgentLoop 类似于 Spring 中的核心 Service，持有所有依赖并协调它们
- process_direct() 类似于一个同步的业务处理方法（这里是 async）
"""

from pathlib import Path

from loguru import logger

from cliagent.agent.classifier import PlainText, classify
from cliagent.agent.context import ContextBuilder
from cliagent.agent.dispatcher import ToolDispatcher
from cliagent.agent.tools.basic import (
    AddTool,
    CalculateTool,
    CountWordsTool,
    EchoTool,
    FormatDateTool,
    GetTimeTool,
    ReverseTool,
)
from cliagent.agent.tools.filesystem import ReadTextFileTool, WriteTextFileTool
from cliagent.agent.tools.registry import ToolRegistry
from cliagent.agent.tools.speech import GetVoicesTool, SpeakTool
from cliagent.agent.tools.web import FetchURLTool, WebSearchTool
from cliagent.channels.manager import OutputRouter
from cliagent.config.schema import Config
from cliagent.providers.base import CompletionError, LLMProvider
from cliagent.providers.speech import Pyttsx3Backend, SpeechBackend
from cliagent.session.manager import InteractionStore
from cliagent.session.state import SessionState

TOOL_TITLE = "🔧 Tool [{name}]"


class AgentLoop:
    """
    Agent 主循环。

    核心属性：
    - provider: 补全接口提供者
    - state: 会话状态（当前模型 + 语音设置），由命令行命令原地修改
    - router: 输出路由器（控制台 / 语音 / 交互日志）
    - store: 交互记录存储（memory.json）
    - tools: 工具注册表
    - dispatcher: 工具调度器
    """

    def __init__(
        self,
        provider: LLMProvider,
        config: Config,
        state: SessionState,
        router: OutputRouter,
        store: InteractionStore,
        speech_backend: SpeechBackend | None = None,
        tools: ToolRegistry | None = None,
    ):
        """
        参数：
            provider: 补全接口提供者
            config: 全局配置（工具参数来自 config.tools）
            state: 会话状态
            router: 输出路由器
            store: 交互记录存储（调用方负责事先 load()）
            speech_backend: 语音工具使用的后端，为 None 时使用 pyttsx3
            tools: 可选的已有注册表；为 None 时新建并注册内置工具
        """
        self.provider = provider
        self.config = config
        self.state = state
        self.router = router
        self.store = store
        self.speech_backend = speech_backend or Pyttsx3Backend(config.speech.base_rate)

        if tools is None:
            self.tools = ToolRegistry()
            self._register_default_tools()
        else:
            self.tools = tools
        self.dispatcher = ToolDispatcher(self.tools)
        self.context = ContextBuilder(self.tools)

    def _register_default_tools(self) -> None:
        """
        注册内置工具集。

        工具分类：
        - 基础工具：时间、回显、加法、计算、字符串处理、日期格式化
        - 文件工具：读/写文本文件（限制在根目录内）
        - Web 工具：抓取 URL、搜索
        - 语音工具：列出音色、播报
        """
        for tool in (
            GetTimeTool(),
            EchoTool(),
            AddTool(),
            CalculateTool(),
            ReverseTool(),
            CountWordsTool(),
            FormatDateTool(),
        ):
            self.tools.register(tool)

        files = self.config.tools.files
        allowed_dir = Path(files.allowed_dir).expanduser() if files.allowed_dir else None
        self.tools.register(ReadTextFileTool(allowed_dir=allowed_dir))
        self.tools.register(WriteTextFileTool(allowed_dir=allowed_dir))

        web = self.config.tools.web
        self.tools.register(FetchURLTool(max_chars=web.fetch_max_chars, timeout=web.fetch_timeout))
        self.tools.register(WebSearchTool(
            max_results=web.search_max_results,
            timeout=web.search_timeout,
            news_api_key=web.news_api_key,
        ))

        self.tools.register(GetVoicesTool(self.speech_backend))
        self.tools.register(SpeakTool(self.speech_backend))

    async def process_direct(self, prompt: str) -> str:
        """
        处理一轮用户输入。

        参数：
            prompt: 用户输入

        返回：
            本轮呈现给用户的文本（回复、工具结果或错误信息）
        """
        try:
            return await self._process(prompt)
        except Exception as e:
            # 循环边界：任何意外异常都只报告，不终止交互式会话
            logger.exception("Unexpected error while processing prompt")
            message = f"Agent Error: {e}"
            self.router.report_error(message)
            return message

    async def _process(self, prompt: str) -> str:
        messages = self.context.build_messages(prompt)

        try:
            response = await self.provider.chat(messages, model=self.state.model)
        except CompletionError as e:
            message = f"Agent Error: {e}"
            self.router.report_error(message)
            return message

        reply = response.text
        logger.debug(f"Reply from {self.state.model}: {reply[:200]}")

        self.store.add(prompt, reply)
        try:
            self.store.save()
        except OSError as e:
            self.router.report_error(f"Error saving memory: {e}")

        result = classify(reply)
        speech = self.state.speech
        if isinstance(result, PlainText):
            await self.router.emit(prompt, reply, speech)
            return reply

        request = result.request
        outcome = await self.dispatcher.dispatch(request)
        if not outcome.success:
            message = f"Tool execution error: {outcome.message}"
            self.router.report_error(message)
            return message

        text = f"Tool {request.tool} executed. The result is: {outcome.value}"
        await self.router.emit(
            prompt,
            text,
            speech,
            title=TOOL_TITLE.format(name=request.tool),
            log_text=f"Tool used: {request.tool}, Result: {outcome.value}",
        )
        return text
