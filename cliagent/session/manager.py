"""
交互记录存储模块 - 提示词/回复对的内存列表与磁盘持久化。

【存储格式 - JSON】
整个文件是一个 JSON 对象：
    {
      "interactions": [
        {"prompt": "...", "response": "..."},
        ...
      ]
    }

每次 Agent 成功拿到回复后追加一条记录并整体重写文件（不做批量合并，也不加锁）。

【容错策略】
- 文件不存在：从空记录开始
- 文件损坏（不是合法 JSON 或结构不符）或无法读取（是目录、无权限）：打印警告并从空记录开始，绝不因此崩溃

【Java 开发者类比】
- InteractionStore 类似于一个带文件持久化的 ArrayList<Interaction>
- save() 相当于每次都用 Jackson 把整个列表序列化覆盖写回
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from cliagent.utils.helpers import ensure_dir


@dataclass
class Interaction:
    """一次交互：用户提示词 + 模型原始回复。"""

    prompt: str
    response: str


class InteractionStore:
    """
    交互记录存储器。

    属性:
        path: 存储文件路径（默认 ~/.cliagent/memory.json）
        interactions: 内存中的交互记录列表（按时间顺序）
    """

    def __init__(self, path: Path):
        self.path = path
        self.interactions: list[Interaction] = []

    def load(self) -> list[Interaction]:
        """
        从磁盘加载交互记录。

        返回:
            加载后的交互记录列表（文件缺失或损坏时为空列表）
        """
        self.interactions = []
        if not self.path.exists():
            return self.interactions

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self.interactions = self._parse(data)
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading memory file {self.path}: {e}. Starting fresh.")
            self.interactions = []
        return self.interactions

    @staticmethod
    def _parse(data: Any) -> list[Interaction]:
        """校验 JSON 结构并转换为 Interaction 列表，结构不符时抛出 ValueError。"""
        if not isinstance(data, dict) or not isinstance(data.get("interactions"), list):
            raise ValueError("expected an object with an 'interactions' array")
        items = []
        for entry in data["interactions"]:
            if not isinstance(entry, dict):
                raise ValueError("interaction entries must be objects")
            items.append(Interaction(
                prompt=str(entry.get("prompt", "")),
                response=str(entry.get("response", "")),
            ))
        return items

    def add(self, prompt: str, response: str) -> Interaction:
        """在内存中追加一条交互记录（不落盘）。"""
        item = Interaction(prompt=prompt, response=response)
        self.interactions.append(item)
        return item

    def save(self) -> None:
        """
        将全部交互记录覆盖写回磁盘。

        异常:
            OSError: 写入失败（由调用方报告，不在此吞掉）
        """
        ensure_dir(self.path.parent)
        payload = {"interactions": [asdict(i) for i in self.interactions]}
        self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def __len__(self) -> int:
        return len(self.interactions)
