"""
LiteLLM 提供者实现模块 —— OpenAI 兼容补全接口的调用层。

本模块是 LLMProvider 抽象基类的唯一实现，通过 LiteLLM 开源库调用
任意 OpenAI 兼容的补全接口（默认是 Groq）。

LiteLLM 是什么？
  LiteLLM 是一个 Python 库，它将 100+ 家 LLM 服务商的 API 统一为 OpenAI 兼容格式。
  类比 Java 世界：LiteLLM 类似于 JDBC —— 一套接口，多种数据库驱动。

路由方式：
  配置中给出的是完整的补全地址（如 https://api.groq.com/openai/v1/chat/completions），
  Config.api_base 把它还原为接口根地址；模型名加上 "openai/" 前缀后，
  LiteLLM 会把请求按 OpenAI 协议发往该根地址。

数据流：
  AgentLoop → LiteLLMProvider.chat() → _resolve_model() → litellm.acompletion() → 补全接口
                                                                    ↓
  AgentLoop ← _parse_response() ← LLMResponse ← choices[0].message ←┘
"""

from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from cliagent.providers.base import CompletionError, LLMProvider, LLMResponse

# LiteLLM 对 OpenAI 兼容接口使用的路由前缀
OPENAI_COMPAT_PREFIX = "openai"


class LiteLLMProvider(LLMProvider):
    """
    基于 LiteLLM 的 LLM 提供者实现类。

    构造参数：
        api_key: API 密钥（Bearer Token）
        api_base: OpenAI 兼容接口的根地址
        default_model: 默认模型名称（如 "llama3-70b-8192"）
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "llama3-70b-8192",
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model

        # 禁用 LiteLLM 的调试日志输出（默认很啰嗦）
        litellm.suppress_debug_info = True
        # 自动丢弃服务商不支持的参数（避免因多余参数导致请求失败）
        litellm.drop_params = True

    def _resolve_model(self, model: str) -> str:
        """
        为模型名添加 "openai/" 前缀，让 LiteLLM 按 OpenAI 协议路由到 api_base。

        已带前缀的模型名保持不变；带斜杠的模型名（如 "meta-llama/llama-4"）同样只加一次前缀。
        """
        if model.startswith(f"{OPENAI_COMPAT_PREFIX}/"):
            return model
        return f"{OPENAI_COMPAT_PREFIX}/{model}"

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
    ) -> LLMResponse:
        """
        发送对话补全请求。

        请求体只包含 model 和 messages 两项，与原始接口约定保持一致。

        参数：
            messages: 对话消息列表
            model: 模型标识符，为空则使用默认模型

        返回：
            LLMResponse

        异常：
            CompletionError: 服务商返回错误（携带其错误信息）或网络失败
        """
        kwargs: dict[str, Any] = {
            "model": self._resolve_model(model or self.default_model),
            "messages": messages,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            # LiteLLM 的异常带有 message 属性，内容即服务商返回的错误信息
            message = getattr(e, "message", None) or str(e) or "Unknown API error occurred"
            logger.error(f"Completion request failed: {message}")
            raise CompletionError(message) from e
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> LLMResponse:
        """
        将 LiteLLM 的原始响应解析为统一的 LLMResponse 格式。

        取 response.choices[0].message.content；choices 为空时 content 为 None。
        """
        choices = getattr(response, "choices", None) or []
        if not choices:
            return LLMResponse(content=None)

        choice = choices[0]
        message = getattr(choice, "message", None)

        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=getattr(message, "content", None),
            finish_reason=getattr(choice, "finish_reason", None) or "stop",
            usage=usage,
        )
