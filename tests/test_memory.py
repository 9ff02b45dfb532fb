"""Tests for the interaction log (agent-log.txt) and the interaction store (memory.json)."""
import json
import re

from cliagent.agent.memory import InteractionLog
from cliagent.session.manager import Interaction, InteractionStore

TIMESTAMP = r"\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\]"


class TestInteractionLog:
    def test_interaction_block_format(self, tmp_path):
        log_file = tmp_path / "logs" / "agent-log.txt"
        InteractionLog(log_file).log_interaction("hello", "hi there")
        content = log_file.read_text(encoding="utf-8")
        assert re.fullmatch(TIMESTAMP + r" User: hello\nResponse: hi there\n\n", content)

    def test_error_block_format(self, tmp_path):
        log_file = tmp_path / "agent-log.txt"
        InteractionLog(log_file).log_error("something broke")
        assert re.fullmatch(TIMESTAMP + r" ERROR: something broke\n\n", log_file.read_text(encoding="utf-8"))

    def test_appends(self, tmp_path):
        log = InteractionLog(tmp_path / "agent-log.txt")
        log.log_interaction("a", "1")
        log.log_interaction("b", "2")
        content = log.log_file.read_text(encoding="utf-8")
        assert content.index("User: a") < content.index("User: b")

    def test_write_failure_is_not_raised(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")
        InteractionLog(blocker / "agent-log.txt").log_error("ignored")


class TestInteractionStore:
    def test_missing_file_starts_empty(self, tmp_path):
        store = InteractionStore(tmp_path / "memory.json")
        assert store.load() == []

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "memory.json"
        store = InteractionStore(path)
        store.add("hi", "hello")
        store.add("2+2?", '{"tool": "add", "args": [2, 2]}')
        store.save()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"interactions": [
            {"prompt": "hi", "response": "hello"},
            {"prompt": "2+2?", "response": '{"tool": "add", "args": [2, 2]}'},
        ]}
        assert path.read_text(encoding="utf-8").startswith('{\n  "interactions"')

        reloaded = InteractionStore(path)
        assert reloaded.load()[0] == Interaction("hi", "hello")
        assert len(reloaded) == 2

    def test_corrupt_json_resets(self, tmp_path):
        path = tmp_path / "memory.json"
        path.write_text("{ broken")
        assert InteractionStore(path).load() == []

    def test_wrong_shape_resets(self, tmp_path):
        path = tmp_path / "memory.json"
        path.write_text(json.dumps(["not", "an", "object"]))
        assert InteractionStore(path).load() == []

    def test_unreadable_path_resets(self, tmp_path):
        path = tmp_path / "memory.json"
        path.mkdir()
        store = InteractionStore(path)
        assert store.load() == []
        assert len(store) == 0
