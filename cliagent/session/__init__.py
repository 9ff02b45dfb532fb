"""
会话模块 - 当前进程的会话状态与交互记录持久化。

- SessionState / SpeechSettings：运行期设置（当前模型、语音输出），由命令行命令原地修改
- InteractionStore：提示词/回复对的存储（memory.json），每轮对话后整体重写
"""

from cliagent.session.manager import Interaction, InteractionStore
from cliagent.session.state import SessionState, SpeechSettings

__all__ = ["Interaction", "InteractionStore", "SessionState", "SpeechSettings"]
