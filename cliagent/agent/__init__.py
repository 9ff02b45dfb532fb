"""
Agent 核心模块

- classifier：判断模型回复是普通文本还是工具调用
- dispatcher：执行工具调用并把结果统一为 ToolResult
- context：构建系统提示词与消息列表
- memory：追加写入的交互日志（agent-log.txt）
- loop：一轮对话的完整流水线（AgentLoop，需显式从 cliagent.agent.loop 导入）
"""

from cliagent.agent.classifier import PlainText, ToolCall, ToolCallRequest, classify
from cliagent.agent.context import ContextBuilder
from cliagent.agent.dispatcher import ToolDispatcher
from cliagent.agent.memory import InteractionLog

__all__ = [
    "ContextBuilder",
    "InteractionLog",
    "PlainText",
    "ToolCall",
    "ToolCallRequest",
    "ToolDispatcher",
    "classify",
]
