"""
LLM 提供者基类定义模块。

本模块定义了与大语言模型补全接口交互的抽象边界：
- LLMResponse     : 补全接口的统一响应格式（文本内容、结束原因、token 用量）
- CompletionError : 补全请求失败（非 2xx、网络错误等），携带服务商返回的错误信息
- LLMProvider     : 抽象基类，定义了所有 LLM 提供者必须实现的接口

架构角色：
  用户输入 → AgentLoop → LLMProvider.chat() → 补全接口 → LLMResponse → 响应分类器

类比 Java：
  - LLMProvider 相当于一个 interface，定义了 chat() 方法
  - LLMResponse 相当于一个不可变的 DTO（Data Transfer Object）
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# 补全接口未返回内容时使用的占位文本
NO_CONTENT = "[No content returned]"


class CompletionError(Exception):
    """补全请求失败。message 为服务商返回的错误信息，缺失时为通用提示。"""


@dataclass
class LLMResponse:
    """
    补全接口的统一响应数据结构。

    属性：
        content: 模型返回的文本内容（接口未返回内容时为 None）
        finish_reason: 结束原因（"stop"=正常结束, "length"=达到长度上限 等）
        usage: token 用量统计（prompt_tokens, completion_tokens, total_tokens）
    """
    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """返回回复文本，内容为空时返回占位文本。"""
        return self.content or NO_CONTENT


class LLMProvider(ABC):
    """
    LLM 提供者抽象基类（类似 Java 的 interface）。

    当前项目中唯一的实现类是 LiteLLMProvider（在 litellm_provider.py 中）。
    测试中可以用 AsyncMock 或简单的子类替代。

    属性：
        api_key: API 密钥
        api_base: API 基础 URL（OpenAI 兼容接口的根地址）
    """

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
    ) -> LLMResponse:
        """
        发送对话补全请求。

        参数：
            messages: 消息列表，每条消息是 {"role": "system/user", "content": "..."} 格式
            model: 模型标识符，为空则使用默认模型

        返回：
            LLMResponse

        异常：
            CompletionError: 请求失败
        """
        pass
