"""
工具调度器模块 (agent/dispatcher.py)

模块职责：
    把分类器解析出的 ToolCallRequest 分发到注册表中的具体工具执行，
    并把一切结果（包括异常）统一转换为 ToolResult。

调度流程：
    1. 按名称查找工具，找不到 → NOT_FOUND
    2. args 不是数组 → INVALID_ARGUMENTS
    3. 按 JSON Schema 校验位置参数，不合法 → INVALID_ARGUMENTS
    4. 按位置参数调用工具（同步返回值直接使用，awaitable 会被 await）
    5. 工具抛出任何异常 → EXECUTION_ERROR，绝不让异常原样冒出

    调度器本身无状态，只读访问注册表。

【Java 开发者类比】
类似于 Spring MVC 的 DispatcherServlet：按名称找到 Handler，校验参数，调用，
再把异常统一转换成错误响应（类似 @ControllerAdvice）。
"""

from loguru import logger

from cliagent.agent.classifier import ToolCallRequest
from cliagent.agent.tools.base import ErrorKind, ToolResult
from cliagent.agent.tools.registry import ToolRegistry


class ToolDispatcher:
    """工具调度器，持有一个只读的工具注册表。"""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def dispatch(self, request: ToolCallRequest) -> ToolResult:
        """
        执行一次工具调用。

        参数:
            request: 工具调用请求（工具名 + 位置参数数组）

        返回:
            ToolResult: 成功时 value 为工具返回值，失败时带错误类型与描述
        """
        name, args = request.tool, request.args
        tool = self.registry.get(name)
        if tool is None:
            logger.warning(f"Tool '{name}' not found")
            return ToolResult.fail(ErrorKind.NOT_FOUND, f"Tool '{name}' not found")

        if not isinstance(args, list):
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Tool arguments must be an array")

        errors = tool.validate_args(args)
        if errors:
            logger.warning(f"Invalid arguments for tool '{name}': {errors}")
            return ToolResult.fail(
                ErrorKind.INVALID_ARGUMENTS,
                f"Invalid arguments for tool '{name}': " + "; ".join(errors),
            )

        logger.info(f"Tool call: {name}({args})")
        try:
            value = await tool.invoke(args)
        except Exception as e:
            # 工具内部的任何异常都转换为失败结果，保护对话循环
            logger.error(f"Error executing tool '{name}': {e}")
            return ToolResult.fail(ErrorKind.EXECUTION_ERROR, f"Error executing tool '{name}': {e}")

        logger.debug(f"Tool {name} returned: {value!r}")
        return ToolResult.ok(value)
