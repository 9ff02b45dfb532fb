"""
文件系统工具模块 (agent/tools/filesystem.py)

模块职责：
    提供两个文本文件工具，允许 Agent 通过工具调用读写本地文件：
      - ReadTextFileTool: 读取 UTF-8 文本文件
      - WriteTextFileTool: 写入 UTF-8 文本文件（自动创建父目录）

    所有路径都被限制在一个根目录内（默认是调用时的当前工作目录，
    可通过 tools.files.allowed_dir 配置）。

安全设计：
    _resolve_path() 辅助函数会：
    1. 把相对路径拼接到根目录上（绝对路径保持不变）
    2. resolve(): 解析为绝对路径，同时展开符号链接（消除 ../ 与软链接逃逸）
    3. 用 is_relative_to() 检查结果是否仍在根目录内，否则拒绝访问

设计模式对比（Java 视角）：
    类似于 Java NIO 的 Files.readString / Files.writeString，
    根目录限制类似于 SecurityManager 的文件访问控制。
"""

from pathlib import Path
from typing import Any

from cliagent.agent.tools.base import Tool


def _resolve_path(path: str, allowed_dir: Path | None = None) -> Path:
    """
    解析并校验文件路径。

    参数:
        path: 原始路径字符串（相对于根目录）
        allowed_dir: 根目录，None 表示当前工作目录

    返回:
        Path: 解析后的绝对路径

    异常:
        PermissionError: 解析后的路径不在根目录内
    """
    root = (allowed_dir or Path.cwd()).expanduser().resolve()
    resolved = (root / path).resolve()
    if not resolved.is_relative_to(root):
        raise PermissionError(f"Access denied: '{path}' is outside {root}")
    return resolved


class ReadTextFileTool(Tool):
    """
    文本文件读取工具。

    类比 Java: 类似于 Files.readString(Path)。
    """

    def __init__(self, allowed_dir: Path | None = None):
        """
        参数:
            allowed_dir: 可选的根目录，未设置时使用当前工作目录
        """
        self._allowed_dir = allowed_dir

    @property
    def name(self) -> str:
        return "readTextFile"

    @property
    def description(self) -> str:
        return "Read a UTF-8 text file relative to the working directory."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "The file path to read"}
            },
            "required": ["path"]
        }

    async def execute(self, path: str, **kwargs: Any) -> str:
        file_path = _resolve_path(path, self._allowed_dir)
        if not file_path.is_file():
            raise FileNotFoundError(f"File '{path}' not found")
        return file_path.read_text(encoding="utf-8")


class WriteTextFileTool(Tool):
    """
    文本文件写入工具。

    写入指定内容到文件，文件已存在时覆盖，父目录不存在时自动创建。
    类比 Java: 类似于 Files.createDirectories() + Files.writeString()。
    """

    def __init__(self, allowed_dir: Path | None = None):
        self._allowed_dir = allowed_dir

    @property
    def name(self) -> str:
        return "writeTextFile"

    @property
    def description(self) -> str:
        return "Write text content to a file relative to the working directory. Creates parent directories if needed."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "The file path to write to"},
                "content": {"type": "string", "description": "The content to write"}
            },
            "required": ["path", "content"]
        }

    async def execute(self, path: str, content: str, **kwargs: Any) -> str:
        file_path = _resolve_path(path, self._allowed_dir)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return f"File '{path}' written successfully"
