"""
配置加载工具模块 (config/loader.py)
=================================
本模块负责 cliagent 配置文件的加载、保存、格式转换与启动校验：
- 配置文件默认路径: ~/.cliagent/config.json（可选，不存在时完全依赖环境变量）
- 配置文件使用 camelCase（驼峰命名），Python 内部使用 snake_case（下划线命名）
- 加载时自动将 camelCase → snake_case，保存时自动将 snake_case → camelCase
- validate_config() 在启动时检查补全接口地址和密钥，不合法时抛出 ConfigError

对于 Java 开发者：
- 类似于 Spring Boot 的 application.yml 加载机制
- camelCase ↔ snake_case 转换类似于 Jackson 的 @JsonNaming 注解功能
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from cliagent.config.schema import Config


class ConfigError(Exception):
    """配置缺失或不合法。启动阶段的致命错误，CLI 捕获后直接退出。"""


def get_config_path() -> Path:
    """获取默认配置文件路径: ~/.cliagent/config.json"""
    return Path.home() / ".cliagent" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    从 JSON 文件加载配置，并合并环境变量 / .env 中的配置。

    加载流程：
    1. 确定配置文件路径（传入的路径 或 默认路径 ~/.cliagent/config.json）
    2. 读取 JSON 文件内容（文件损坏时打印警告并忽略）
    3. 将 camelCase 键名转换为 snake_case（convert_keys）
    4. 构造 Config：文件中的值优先，其余由环境变量补齐

    参数:
        config_path: 可选的配置文件路径。为 None 时使用默认路径。

    返回:
        Config 配置对象实例

    异常:
        ConfigError: 配置值无法通过 Pydantic 校验
    """
    path = config_path or get_config_path()
    data: dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError("top-level value must be an object")
            data = convert_keys(raw)
        except (json.JSONDecodeError, ValueError) as e:
            # 配置文件损坏时降级为仅使用环境变量，而非直接报错退出
            logger.warning(f"Failed to load config from {path}: {e}. Using environment only.")

    try:
        return Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def validate_config(config: Config) -> Config:
    """
    启动校验：补全接口地址和密钥必须存在且格式合理。

    规则：
    - GROQ_API_URL 必须存在，且以 http 开头
    - GROQ_API_KEY 必须存在，且长度不少于 10 个字符

    异常:
        ConfigError: 任一规则不满足
    """
    if not config.api_url:
        raise ConfigError("Missing required environment variable: GROQ_API_URL")
    if not config.api_key:
        raise ConfigError("Missing required environment variable: GROQ_API_KEY")
    if not config.api_url.startswith("http"):
        raise ConfigError("API_URL must be a valid URL")
    if len(config.api_key) < 10:
        raise ConfigError("API_KEY appears to be invalid")
    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    将配置对象保存为 JSON 文件（camelCase 键名，带缩进格式化）。

    参数:
        config: 要保存的配置对象
        config_path: 可选的保存路径。为 None 时使用默认路径。
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def convert_keys(data: Any) -> Any:
    """
    递归地将字典中所有 camelCase 键名转换为 snake_case。

    示例: {"outputMode": "voice"} → {"output_mode": "voice"}
    """
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """
    递归地将字典中所有 snake_case 键名转换为 camelCase。

    示例: {"output_mode": "voice"} → {"outputMode": "voice"}
    """
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """
    将 camelCase 字符串转换为 snake_case。
    例: "outputMode" → "output_mode", "apiUrl" → "api_url"
    """
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """
    将 snake_case 字符串转换为 camelCase。
    例: "output_mode" → "outputMode", "api_url" → "apiUrl"
    """
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
