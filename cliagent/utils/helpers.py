"""
工具函数集合 - cliagent 项目全局通用的辅助函数。

函数分类：
- 路径管理：ensure_dir
- 时间工具：iso_timestamp
- 字符串工具：truncate_string
"""

from datetime import datetime, timezone
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """
    确保目录存在，不存在则递归创建。

    参数:
        path: 目标目录路径

    返回:
        创建后的目录路径（原样返回）
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def iso_timestamp(when: datetime | None = None) -> str:
    """
    获取 UTC 时间的 ISO 8601 字符串，精确到毫秒并以 "Z" 结尾。

    例: 2026-10-19T08:30:12.345Z

    参数:
        when: 指定时间，为 None 时取当前时间
    """
    when = (when or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return when.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """
    截断字符串到指定最大长度，超出时添加后缀。

    参数:
        s: 原始字符串
        max_len: 最大长度（不含后缀），默认 100
        suffix: 截断后缀，默认 "..."

    返回:
        截断后的字符串
    """
    if len(s) <= max_len:
        return s
    return s[:max_len] + suffix
