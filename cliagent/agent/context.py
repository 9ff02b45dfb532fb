"""
上下文构建器模块 —— 负责组装发送给模型的提示词和消息列表。

每一轮对话都是无状态的单轮请求，消息列表固定为两条：
  - role="system": 系统提示词，介绍身份、列出所有已注册工具及其位置参数、说明工具调用格式
  - role="user": 当前用户输入

系统提示词在每轮重新生成，因此运行期通过 add_tool 注册的新工具下一轮即可被模型看到。

【Java 类比】类似于一个 PromptTemplateService，
负责将模板 + 工具清单渲染成最终的提示词字符串。
"""

from typing import Any

from cliagent.agent.tools.registry import ToolRegistry


class ContextBuilder:
    """
    上下文构建器。

    属性:
        registry: 工具注册表，用于在系统提示词中列出可用工具
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def build_system_prompt(self) -> str:
        """
        构建系统提示词。

        返回:
            系统提示词字符串（身份 + 工具清单 + 工具调用格式说明）
        """
        tool_lines = [self._describe_tool(d["function"]) for d in self.registry.get_definitions()]
        tools_section = "\n".join(tool_lines) if tool_lines else "(no tools registered)"

        return f"""You are a helpful CLI assistant.
You have access to the following tools (arguments are positional, in the order listed):
{tools_section}

To use a tool, respond ONLY with this JSON format:
{{ "tool": "toolName", "args": [arg1, arg2, ...] }}

Pass null for an optional argument to use its default.
Otherwise, respond with a helpful text answer."""

    @staticmethod
    def _describe_tool(fn: dict[str, Any]) -> str:
        """把单个工具定义渲染为一行：- name(arg1, arg2?): description"""
        params = fn.get("parameters") or {}
        required = set(params.get("required", []))
        names = [p if p in required else f"{p}?" for p in params.get("properties", {})]
        line = f"- {fn['name']}({', '.join(names)})"
        if fn.get("description"):
            line += f": {fn['description']}"
        return line

    def build_messages(self, prompt: str) -> list[dict[str, Any]]:
        """
        构建一轮请求的完整消息列表。

        参数:
            prompt: 用户输入

        返回:
            [system, user] 两条消息
        """
        return [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": prompt},
        ]
