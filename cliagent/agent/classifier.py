"""
回复分类器模块 - 判断模型回复是"最终文本"还是"工具调用"。

约定的工具调用格式（整条回复就是一个 JSON 对象）：
    {"tool": "add", "args": [2, 3]}

分类规则：
    1. 去掉首尾空白后，必须以 { 开头、以 } 结尾，否则是普通文本
    2. 必须能被 json.loads 解析，且结果是对象
    3. tool 必须是字符串，args 必须是数组
    任何一条不满足都视为普通文本，原文（未去空白）原样返回。
    解析错误只记 debug 日志，不会向上抛出。

【Java 开发者类比】
classify() 返回一个"密封类"（sealed interface）的两种实现之一：
PlainText 或 ToolCall，调用方用 isinstance 分支处理（类似 Java 的模式匹配 switch）。
"""

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger


@dataclass
class ToolCallRequest:
    """从模型回复中解析出的工具调用请求。"""

    tool: str
    args: list[Any]


@dataclass
class PlainText:
    """普通文本回复。"""

    text: str


@dataclass
class ToolCall:
    """工具调用回复。"""

    request: ToolCallRequest


def classify(raw: str) -> PlainText | ToolCall:
    """
    对模型原始回复进行分类。

    参数:
        raw: 模型原始回复文本

    返回:
        ToolCall（合法的工具调用）或 PlainText（其他一切情况，文本保持原样）
    """
    trimmed = raw.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return PlainText(raw)

    try:
        data = json.loads(trimmed)
    except json.JSONDecodeError as e:
        logger.debug(f"Reply looks like JSON but failed to parse: {e}")
        return PlainText(raw)

    if not isinstance(data, dict):
        return PlainText(raw)

    tool, args = data.get("tool"), data.get("args")
    if not isinstance(tool, str) or not isinstance(args, list):
        logger.debug("JSON reply is not a tool call (needs string 'tool' and array 'args')")
        return PlainText(raw)

    return ToolCall(ToolCallRequest(tool=tool, args=args))
