"""Tests for the built-in basic tools."""
import re
import time

import pytest

from cliagent.agent.tools.basic import (
    AddTool,
    CalculateTool,
    CountWordsTool,
    EchoTool,
    FormatDateTool,
    GetTimeTool,
    ReverseTool,
    evaluate_expression,
)


class TestGetTime:
    @pytest.mark.asyncio
    async def test_iso_utc_with_millis(self):
        value = await GetTimeTool().execute()
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", value)


class TestEcho:
    @pytest.mark.asyncio
    async def test_string(self):
        assert await EchoTool().execute("hello") == "hello"

    @pytest.mark.asyncio
    async def test_number(self):
        assert await EchoTool().execute(42) == "42"


class TestAdd:
    @pytest.mark.asyncio
    async def test_numbers(self):
        assert await AddTool().execute(2, 3) == 5

    @pytest.mark.asyncio
    async def test_numeric_strings(self):
        assert await AddTool().execute("2", " 3.5 ") == 5.5

    @pytest.mark.asyncio
    async def test_non_numeric(self):
        with pytest.raises(ValueError, match="Add requires numeric arguments"):
            await AddTool().execute("x", "y")


class TestCalculate:
    def test_precedence_and_parentheses(self):
        assert evaluate_expression("2 * (3 + 4)") == 14

    def test_integral_division_result(self):
        assert evaluate_expression("7/1") == 7

    def test_fractional_result(self):
        assert evaluate_expression("1/4") == 0.25

    def test_unsafe_characters_are_stripped(self):
        # letters and whitespace disappear before evaluation
        assert evaluate_expression("2 x 3") == 23

    def test_negative_numbers(self):
        assert evaluate_expression("-5 + 2") == -3

    def test_division_by_zero(self):
        with pytest.raises(ValueError):
            evaluate_expression("1/0")

    def test_malformed(self):
        with pytest.raises(ValueError):
            evaluate_expression("2+*")

    def test_empty_after_sanitizing(self):
        with pytest.raises(ValueError):
            evaluate_expression("abc")

    def test_huge_exponent_refused(self):
        with pytest.raises(ValueError, match="too large"):
            evaluate_expression("9**9**9")

    def test_nested_powers_refused(self):
        with pytest.raises(ValueError, match="result is too large"):
            evaluate_expression("((9**999)**999)**999")

    def test_moderate_power_allowed(self):
        assert evaluate_expression("9**999") == 9 ** 999
        assert evaluate_expression("2**-2") == 0.25

    def test_call_syntax_rejected(self):
        with pytest.raises(ValueError):
            evaluate_expression("2(3)")

    @pytest.mark.asyncio
    async def test_tool_entry_point(self):
        assert await CalculateTool().execute("10 - 4") == 6


class TestStrings:
    @pytest.mark.asyncio
    async def test_reverse(self):
        assert await ReverseTool().execute("abc") == "cba"

    @pytest.mark.asyncio
    async def test_count_words(self):
        assert await CountWordsTool().execute("  the quick\tbrown\nfox ") == 4

    @pytest.mark.asyncio
    async def test_count_words_blank(self):
        assert await CountWordsTool().execute("   ") == 0


class TestFormatDate:
    @pytest.mark.asyncio
    async def test_unix_is_close_to_now(self):
        value = await FormatDateTool().execute("unix")
        assert isinstance(value, int)
        assert abs(value - time.time()) < 2

    @pytest.mark.asyncio
    async def test_iso(self):
        value = await FormatDateTool().execute("iso")
        assert value.endswith("Z")

    @pytest.mark.asyncio
    async def test_default_is_full(self):
        tool = FormatDateTool()
        assert isinstance(await tool.execute(), str)

    @pytest.mark.asyncio
    async def test_unknown_format_lists_valid_names(self):
        with pytest.raises(ValueError) as exc:
            await FormatDateTool().execute("bogus")
        assert str(exc.value) == "Unknown format 'bogus'. Available formats: full, date, time, iso, unix"
