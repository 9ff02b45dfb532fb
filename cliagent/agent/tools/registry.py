"""
工具注册表模块 (agent/tools/registry.py)

模块职责：
    管理所有 Agent 可用工具的注册表（Registry），提供工具的注册、查找与描述能力。
    执行逻辑在 agent/dispatcher.py 中，注册表本身只负责"有哪些工具"。

不变量：
    注册表中永远不会出现两个同名工具，对已存在的名称再次注册会返回
    ALREADY_EXISTS 失败结果，且不覆盖原有工具。

设计模式对比（Java 视角）：
    类似于 Spring 中的 BeanFactory / ServiceLocator 模式：
    - register() 相当于注册一个 Bean（但拒绝重复定义）
    - get() 相当于 getBean()
"""

from collections.abc import Callable
from typing import Any

from loguru import logger

from cliagent.agent.tools.base import ErrorKind, FunctionTool, Tool, ToolResult


class ToolRegistry:
    """
    Agent 工具注册表。

    内部使用 dict[str, Tool] 存储，以工具名称为键（区分大小写），保持注册顺序。
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> ToolResult:
        """
        注册一个工具到注册表。

        参数:
            tool: 工具实例，其 name 属性作为注册键

        返回:
            ToolResult: 成功时 value 为提示文本；名称为空、对象不是工具时为
            INVALID_ARGUMENTS，名称已存在时为 ALREADY_EXISTS（注册表保持不变）
        """
        if not isinstance(tool, Tool):
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Tool implementation must be a Tool instance")

        name = tool.name
        if not isinstance(name, str) or not name.strip():
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Tool name must be a non-empty string")

        if name in self._tools:
            logger.warning(f"Tool '{name}' already registered, keeping the existing one")
            return ToolResult.fail(ErrorKind.ALREADY_EXISTS, f"Tool '{name}' already exists.")

        self._tools[name] = tool
        logger.debug(f"Registered tool: {name}")
        return ToolResult.ok(f"Successfully added tool: {name}")

    def add_tool(self, name: str, fn: Callable[..., Any], description: str = "") -> ToolResult:
        """
        运行期注册一个普通函数为工具。

        参数:
            name: 工具名称
            fn: 同步或异步可调用对象，调用时按位置参数传入 args
            description: 可选的工具描述（默认取函数文档字符串首行）

        返回:
            ToolResult: 同 register()；fn 不可调用时为 INVALID_ARGUMENTS
        """
        if not isinstance(name, str) or not name.strip():
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Tool name must be a non-empty string")
        if not callable(fn):
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Tool function must be a valid function")
        return self.register(FunctionTool(name, fn, description))

    def get(self, name: str) -> Tool | None:
        """按名称获取工具实例，未找到返回 None。"""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        """检查指定名称的工具是否已注册。"""
        return name in self._tools

    def get_definitions(self) -> list[dict[str, Any]]:
        """获取所有已注册工具的 OpenAI Function Calling 格式定义。"""
        return [tool.to_schema() for tool in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        """获取所有已注册工具的名称列表（按注册顺序）。"""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
