"""
交互日志模块 - 追加写入的纯文本日志（agent-log.txt）。

每次交互追加一个带时间戳的块：
    [2026-10-19T08:30:12.345Z] User: <prompt>
    Response: <response>

错误追加：
    [2026-10-19T08:30:12.345Z] ERROR: <message>

【容错策略】
写入失败只通过日志报告，绝不向调用方抛出。

【Java 开发者类比】
相当于一个追加写入的日志文件（类似 Log4j 的 FileAppender），但格式固定、面向用户阅读。
"""

from pathlib import Path

from loguru import logger

from cliagent.utils.helpers import ensure_dir, iso_timestamp


class InteractionLog:
    """
    交互日志写入器。

    属性:
        log_file: 日志文件路径（默认 ~/.cliagent/logs/agent-log.txt）
    """

    def __init__(self, log_file: Path):
        self.log_file = log_file

    def log_interaction(self, prompt: str, response: str) -> None:
        """
        追加一条交互记录。

        参数:
            prompt: 用户输入
            response: 展示给用户的回复文本
        """
        self._append(f"[{iso_timestamp()}] User: {prompt}\nResponse: {response}\n\n")

    def log_error(self, message: str) -> None:
        """追加一条错误记录。"""
        self._append(f"[{iso_timestamp()}] ERROR: {message}\n\n")

    def _append(self, block: str) -> None:
        try:
            ensure_dir(self.log_file.parent)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(block)
        except OSError as e:
            logger.error(f"Error writing to log file {self.log_file}: {e}")
