"""
配置模块 (config)
================
本模块是 cliagent 的配置系统入口，负责：
1. 定义配置数据模型（schema.py）—— 使用 Pydantic 定义所有配置项的结构和默认值
2. 加载/保存/校验配置（loader.py）—— 合并 JSON 配置文件与环境变量，启动时校验接口配置
"""

from cliagent.config.loader import ConfigError, get_config_path, load_config, validate_config
from cliagent.config.schema import Config

__all__ = ["Config", "ConfigError", "get_config_path", "load_config", "validate_config"]
