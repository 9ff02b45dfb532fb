"""
工具函数子包 - 提供路径管理、时间戳、字符串截断等通用辅助函数。
"""

from cliagent.utils.helpers import ensure_dir, iso_timestamp, truncate_string

__all__ = ["ensure_dir", "iso_timestamp", "truncate_string"]
