"""
Agent 工具子包 (agent/tools)

模块职责：
    定义 Agent 可调用的所有"工具"（Tool），是模型与外部世界交互的桥梁。
    工具系统采用经典的"注册表模式"：
      - Tool（基类）：定义工具的统一接口（名称、描述、参数 schema、执行方法）
      - ToolRegistry（注册表）：管理所有工具实例，拒绝重名注册

在架构中的位置：
    Agent 循环 (agent/loop.py) 拿到模型回复后交给分类器 (agent/classifier.py)，
    若识别为工具调用，则由调度器 (agent/dispatcher.py) 在注册表中查找并执行。

内置工具清单：
    - getTime / echo / add / calculate / reverse / countWords / formatDate：基础工具
    - readTextFile / writeTextFile：文本文件读写（限制在根目录内）
    - fetchURL / webSearch：网页抓取与搜索
    - getVoices / speak：语音播报
"""

from cliagent.agent.tools.base import ErrorKind, FunctionTool, Tool, ToolResult
from cliagent.agent.tools.registry import ToolRegistry

__all__ = ["ErrorKind", "FunctionTool", "Tool", "ToolRegistry", "ToolResult"]
