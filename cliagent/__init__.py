"""
cliagent - 轻量级命令行 AI 助手

模块概述：
    本文件是 cliagent 包的入口文件（__init__.py），定义了包的元信息。
    cliagent 是一个交互式命令行聊天客户端：把用户输入转发给托管的大模型补全接口，
    从模型回复中识别并执行单个结构化"工具调用"，并把交互记录持久化。

    整个项目的核心功能包括：
    - 基于 OpenAI 兼容接口的对话（通过 LiteLLM 调用，默认对接 Groq）
    - 工具调用（时间、计算、文件读写、网页抓取、搜索、语音播报等）
    - 文本 / 语音双通道输出
    - 交互日志与交互记录存储
"""

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出等场景的品牌标识
__logo__ = "🧠"
