"""
基础工具模块 (agent/tools/basic.py)

模块职责：
    提供不依赖外部资源的基础工具：
      - GetTimeTool: 当前 UTC 时间（ISO 8601）
      - EchoTool: 原样返回输入
      - AddTool: 两数相加（数字字符串会被转换）
      - CalculateTool: 四则运算表达式求值
      - ReverseTool / CountWordsTool: 字符串处理
      - FormatDateTool: 按命名格式输出当前日期时间

calculate 的安全设计：
    1. 先剔除 0-9 + - * / ( ) . 以外的所有字符（注意：这意味着意外的子串会被
       静默删除而改变表达式含义，例如 "2 x 3" 变成 "23"）
    2. 用 ast 解析剩余文本，只允许数字、一元正负号和 + - * / // ** 运算
    3. 表达式写法错误时直接在求值阶段失败，不额外做语法推断
"""

import ast
import math
import operator
import re
import time
from datetime import datetime
from typing import Any

from cliagent.agent.tools.base import Tool
from cliagent.utils.helpers import iso_timestamp

# calculate 允许保留的字符以外的一切都会被剔除
_UNSAFE_CHARS = re.compile(r"[^0-9+\-*/().]")

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Pow: operator.pow,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}
MAX_EXPONENT = 1000  # 单次幂运算的指数上限
MAX_POWER_BITS = 100_000  # 整数幂结果的位数上限，嵌套幂同样受限

DATE_FORMATS = ("full", "date", "time", "iso", "unix")


def _to_number(value: Any) -> int | float:
    """把数字或数字字符串转换为数值，无法转换时抛出 ValueError。"""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        try:
            number = int(text)
        except ValueError:
            number = float(text)
    if isinstance(number, float) and math.isnan(number):
        raise ValueError("NaN is not a number")
    return number


def _check_power(base: int | float, exponent: int | float) -> None:
    """幂运算前检查指数和结果规模，超限时抛出 ValueError。"""
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"exponent {exponent} is too large")
    if isinstance(base, int) and isinstance(exponent, int) and base.bit_length() * exponent > MAX_POWER_BITS:
        raise ValueError("result is too large")


def _eval_node(node: ast.AST) -> int | float:
    """递归求值受限的算术语法树。"""
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left, right = _eval_node(node.left), _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BIN_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f"unsupported expression element: {type(node).__name__}")


def evaluate_expression(expression: str) -> int | float:
    """
    对剔除非法字符后的表达式求值。

    参数:
        expression: 原始表达式（可能含有空格、字母等，会被剔除）

    返回:
        计算结果；整数值的浮点结果会转换为 int（如 7/1 → 7）

    异常:
        ValueError: 表达式为空、语法错误、除零或结果不是实数
    """
    sanitized = _UNSAFE_CHARS.sub("", expression)
    try:
        result = _eval_node(ast.parse(sanitized, mode="eval"))
    except (SyntaxError, ZeroDivisionError, OverflowError, ValueError, TypeError) as e:
        raise ValueError(f"Cannot evaluate '{sanitized}': {e}") from e
    if isinstance(result, complex):
        raise ValueError(f"Cannot evaluate '{sanitized}': result is not a real number")
    if isinstance(result, float) and math.isfinite(result) and result.is_integer():
        return int(result)
    return result


class GetTimeTool(Tool):
    """返回当前 UTC 时间（ISO 8601，毫秒精度，Z 结尾）。"""

    name = "getTime"
    description = "Get the current time as an ISO 8601 UTC timestamp."
    parameters = {"type": "object", "properties": {}}

    async def execute(self, **kwargs: Any) -> str:
        return iso_timestamp()


class EchoTool(Tool):
    """原样返回字符串或数字。"""

    name = "echo"
    description = "Echo back the given string or number."
    parameters = {
        "type": "object",
        "properties": {
            "msg": {"type": ["string", "number"], "description": "Text or number to echo"}
        },
        "required": ["msg"]
    }

    async def execute(self, msg: str | int | float, **kwargs: Any) -> str:
        return str(msg)


class AddTool(Tool):
    """两数相加。接受数字或数字字符串，其余输入报错。"""

    name = "add"
    description = "Add two numbers."
    parameters = {
        "type": "object",
        "properties": {
            "a": {"type": ["number", "string"], "description": "First number"},
            "b": {"type": ["number", "string"], "description": "Second number"}
        },
        "required": ["a", "b"]
    }

    async def execute(self, a: Any, b: Any, **kwargs: Any) -> int | float:
        try:
            return _to_number(a) + _to_number(b)
        except ValueError:
            raise ValueError("Add requires numeric arguments") from None


class CalculateTool(Tool):
    """算术表达式求值，详见模块说明中的安全设计。"""

    name = "calculate"
    description = "Evaluate an arithmetic expression using digits, + - * / and parentheses, e.g. '2 * (3 + 4)'."
    parameters = {
        "type": "object",
        "properties": {
            "expression": {"type": "string", "description": "Arithmetic expression"}
        },
        "required": ["expression"]
    }

    async def execute(self, expression: str, **kwargs: Any) -> int | float:
        return evaluate_expression(expression)


class ReverseTool(Tool):
    name = "reverse"
    description = "Reverse a string."
    parameters = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to reverse"}
        },
        "required": ["text"]
    }

    async def execute(self, text: str, **kwargs: Any) -> str:
        return text[::-1]


class CountWordsTool(Tool):
    name = "countWords"
    description = "Count the whitespace-separated words in a text."
    parameters = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to count"}
        },
        "required": ["text"]
    }

    async def execute(self, text: str, **kwargs: Any) -> int:
        return len(text.split())


class FormatDateTool(Tool):
    """
    按命名格式输出当前日期时间。

    格式：
        full - 本地日期 + 时间（区域格式）
        date - 本地日期
        time - 本地时间
        iso  - UTC ISO 8601
        unix - 自 epoch 以来的整数秒
    """

    name = "formatDate"
    description = "Format the current date. Formats: full, date, time, iso, unix (default: full)."
    parameters = {
        "type": "object",
        "properties": {
            "format": {"type": "string", "description": "One of: full, date, time, iso, unix"}
        }
    }

    async def execute(self, format: str = "full", **kwargs: Any) -> str | int:
        now = datetime.now()
        if format == "full":
            return now.strftime("%c")
        if format == "date":
            return now.strftime("%x")
        if format == "time":
            return now.strftime("%X")
        if format == "iso":
            return iso_timestamp()
        if format == "unix":
            return int(time.time())
        raise ValueError(f"Unknown format '{format}'. Available formats: {', '.join(DATE_FORMATS)}")
