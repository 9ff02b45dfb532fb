"""Tests for agent/classifier.py: plain text vs tool-call detection."""
from cliagent.agent.classifier import PlainText, ToolCall, ToolCallRequest, classify


class TestPlainText:
    def test_ordinary_sentence(self):
        assert classify("Hello there!") == PlainText("Hello there!")

    def test_text_is_returned_unchanged(self):
        raw = "  some reply with spaces  \n"
        assert classify(raw) == PlainText(raw)

    def test_json_embedded_in_prose(self):
        raw = 'Sure: {"tool": "add", "args": [1, 2]}'
        assert isinstance(classify(raw), PlainText)

    def test_braces_but_invalid_json(self):
        raw = "{not json at all}"
        assert classify(raw) == PlainText(raw)

    def test_non_string_tool(self):
        assert isinstance(classify('{"tool": 5, "args": []}'), PlainText)

    def test_args_not_array(self):
        assert isinstance(classify('{"tool": "add", "args": "2,3"}'), PlainText)

    def test_missing_args(self):
        assert isinstance(classify('{"tool": "getTime"}'), PlainText)

    def test_empty_string(self):
        assert classify("") == PlainText("")


class TestToolCall:
    def test_simple_call(self):
        result = classify('{"tool": "add", "args": [2, 3]}')
        assert result == ToolCall(ToolCallRequest(tool="add", args=[2, 3]))

    def test_surrounding_whitespace_is_trimmed(self):
        result = classify('\n  { "tool": "getTime", "args": [] }  \n')
        assert isinstance(result, ToolCall)
        assert result.request.tool == "getTime"
        assert result.request.args == []

    def test_extra_keys_are_ignored(self):
        result = classify('{"tool": "echo", "args": ["hi"], "reason": "greeting"}')
        assert isinstance(result, ToolCall)
        assert result.request.args == ["hi"]

    def test_mixed_argument_types(self):
        result = classify('{"tool": "speak", "args": ["Hello", 1.5, null]}')
        assert result.request.args == ["Hello", 1.5, None]
