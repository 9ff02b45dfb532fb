"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 cliagent 的完整配置结构。
所有配置项都有默认值（补全接口地址和密钥除外，它们必须由用户提供）。

整体配置结构（树形）：
Config (根配置)
├── api_url / api_key / model   - 补全接口配置（读取 GROQ_API_URL / GROQ_API_KEY / GROQ_MODEL）
├── available_models            - `setModel` 命令允许切换的模型列表
├── speech                      - 语音输出的启动默认值（开关、输出模式、音色、语速）
├── tools                       - 工具配置（网页抓取/搜索、文件访问根目录）
└── data_dir                    - 数据目录（交互日志、交互记录、命令历史）

对于 Java 开发者：
- Pydantic 的 BaseModel 类似于 Java 的 POJO/Record，但自带字段验证和默认值
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Groq 上可用的模型列表（`listModels` / `setModel` 使用）
DEFAULT_MODELS = [
    "llama3-70b-8192",
    "llama3-8b-8192",
    "llama-3.1-8b-instant",
    "llama-3.3-70b-versatile",
    "gemma2-9b-it",
    "compound-beta",
    "compound-beta-mini",
    "mistral-saba-24b",
    "qwen-qwq-32b",
]


class SpeechConfig(BaseModel):
    """语音输出配置。这些值只作为启动时的默认值，运行期由 `voice ...` 命令修改。"""
    enabled: bool = False  # 是否启用语音输出
    output_mode: Literal["text", "voice", "both"] = "both"  # 输出模式
    voice: str | None = None  # 默认音色（None 表示系统默认）
    speed: float = Field(default=1.0, ge=0.5, le=2.0)  # 语速倍率
    base_rate: int = 175  # 1.0 倍速对应的 pyttsx3 语速（每分钟词数）
    male_voice: str = "Microsoft David Desktop"  # `voice male` 使用的音色
    female_voice: str = "Microsoft Zira Desktop"  # `voice female` 使用的音色


class WebToolsConfig(BaseModel):
    """网页工具配置（fetchURL / webSearch）。"""
    fetch_max_chars: int = 1000  # fetchURL 返回内容的最大字符数，超出截断
    fetch_timeout: float = 30.0  # fetchURL 超时（秒）
    search_timeout: float = 10.0  # webSearch 单次请求超时（秒）
    search_max_results: int = 5  # webSearch 默认结果数
    news_api_key: str = "demo"  # NYT Article Search API 密钥


class FileToolsConfig(BaseModel):
    """文件工具配置。allowed_dir 为空时以当前工作目录作为访问根目录。"""
    allowed_dir: str | None = None


class ToolsConfig(BaseModel):
    """工具总配置。"""
    web: WebToolsConfig = Field(default_factory=WebToolsConfig)
    files: FileToolsConfig = Field(default_factory=FileToolsConfig)


class Config(BaseSettings):
    """
    cliagent 根配置类。

    继承自 Pydantic 的 BaseSettings，除了支持从 JSON 文件加载外，
    还支持从环境变量和 .env 文件读取配置：
    - 补全接口三项沿用 GROQ_API_URL / GROQ_API_KEY / GROQ_MODEL
    - 其余配置的环境变量前缀为 CLIAGENT_，嵌套分隔符为 __ (双下划线)
    - 示例: CLIAGENT_SPEECH__ENABLED=true 可开启语音输出
    """
    api_url: str = Field(default="", validation_alias=AliasChoices("api_url", "groq_api_url"))
    api_key: str = Field(default="", validation_alias=AliasChoices("api_key", "groq_api_key"))
    model: str = Field(default="llama3-70b-8192", validation_alias=AliasChoices("model", "groq_model"))
    available_models: list[str] = Field(default_factory=lambda: list(DEFAULT_MODELS))
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    data_dir: str = "~/.cliagent"

    @property
    def data_path(self) -> Path:
        """获取展开后的数据目录绝对路径（将 ~ 展开为用户主目录）。"""
        return Path(self.data_dir).expanduser()

    @property
    def log_file(self) -> Path:
        """交互日志文件路径：<data_dir>/logs/agent-log.txt"""
        return self.data_path / "logs" / "agent-log.txt"

    @property
    def memory_file(self) -> Path:
        """交互记录文件路径：<data_dir>/memory.json"""
        return self.data_path / "memory.json"

    @property
    def api_base(self) -> str:
        """
        由完整的补全地址推导 API Base。

        例: https://api.groq.com/openai/v1/chat/completions → https://api.groq.com/openai/v1
        """
        base = self.api_url.rstrip("/")
        suffix = "/chat/completions"
        if base.endswith(suffix):
            base = base[: -len(suffix)]
        return base

    model_config = SettingsConfigDict(
        env_prefix="CLIAGENT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )
