"""Tests for agent/tools/web.py using httpx.MockTransport (no real network)."""
import httpx
import pytest

from cliagent.agent.tools.web import FetchURLTool, WebSearchTool


def _transport(handler):
    return httpx.MockTransport(handler)


class TestFetchURL:
    @pytest.mark.asyncio
    async def test_short_body(self):
        tool = FetchURLTool(transport=_transport(lambda request: httpx.Response(200, text="hello")))
        assert await tool.execute("https://example.com") == "hello"

    @pytest.mark.asyncio
    async def test_truncation(self):
        body = "a" * 1500
        tool = FetchURLTool(transport=_transport(lambda request: httpx.Response(200, text=body)))
        result = await tool.execute("https://example.com")
        assert result == "a" * 1000 + "... (truncated, total length: 1500)"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        tool = FetchURLTool(transport=_transport(lambda request: httpx.Response(404)))
        assert await tool.execute("https://example.com/missing") == "Error: HTTP request failed with status 404"

    @pytest.mark.asyncio
    async def test_network_error_returned_as_string(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await FetchURLTool(transport=_transport(handler)).execute("https://example.com")
        assert result.startswith("Error fetching URL:")

    @pytest.mark.asyncio
    async def test_rejects_non_http_scheme(self):
        result = await FetchURLTool().execute("file:///etc/passwd")
        assert result.startswith("Error: URL must be a valid HTTP/HTTPS URL")


WIKI_PAYLOAD = {
    "query": {
        "search": [
            {"title": "Python (programming language)", "snippet": "<span class=\"searchmatch\">Python</span> is a language"},
            {"title": "Monty Python", "snippet": "British comedy &amp; more"},
        ]
    }
}

NYT_PAYLOAD = {
    "response": {
        "docs": [
            {
                "headline": {"main": "Markets rally"},
                "abstract": "Stocks rose sharply.",
                "pub_date": "2024-03-05T10:00:00+00:00",
                "web_url": "https://www.nytimes.com/markets",
            }
        ]
    }
}


class TestWebSearch:
    @pytest.mark.asyncio
    async def test_wikipedia_results(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json=WIKI_PAYLOAD)

        result = await WebSearchTool(transport=_transport(handler)).execute("python", 2)
        assert seen[0].host == "en.wikipedia.org"
        assert seen[0].params["srlimit"] == "2"
        assert result.startswith('Search Results for: "python"')
        assert "1. Python (programming language)" in result
        assert "   Python is a language" in result
        assert "British comedy & more" in result
        assert "URL: https://en.wikipedia.org/wiki/Python_%28programming_language%29" in result

    @pytest.mark.asyncio
    async def test_news_query_uses_nyt_first(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(200, json=NYT_PAYLOAD)

        result = await WebSearchTool(transport=_transport(handler)).execute("latest market news")
        assert hosts == ["api.nytimes.com"]
        assert "1. Markets rally" in result
        assert "Published: Tue Mar 05 2024" in result
        assert "URL: https://www.nytimes.com/markets" in result

    @pytest.mark.asyncio
    async def test_news_falls_back_to_wikipedia(self):
        def handler(request):
            if request.url.host == "api.nytimes.com":
                return httpx.Response(429)
            return httpx.Response(200, json=WIKI_PAYLOAD)

        result = await WebSearchTool(transport=_transport(handler)).execute("python news")
        assert result.startswith('Search Results for: "python news"')

    @pytest.mark.asyncio
    async def test_no_results(self):
        tool = WebSearchTool(transport=_transport(lambda request: httpx.Response(200, json={"query": {"search": []}})))
        result = await tool.execute("zzzzqqq")
        assert result.startswith('No search results found for query: "zzzzqqq"')

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["srlimit"])
            return httpx.Response(200, json=WIKI_PAYLOAD)

        tool = WebSearchTool(transport=_transport(handler))
        await tool.execute("python", 50)
        await tool.execute("python", 0)
        assert seen == ["10", "5"]

    @pytest.mark.asyncio
    async def test_network_error_returned_as_string(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        result = await WebSearchTool(transport=_transport(handler)).execute("python")
        assert result.startswith("Error performing web search:")

    @pytest.mark.asyncio
    async def test_news_html_body_falls_back_to_wikipedia(self):
        def handler(request):
            if request.url.host == "api.nytimes.com":
                return httpx.Response(200, text="<html>rate limited</html>")
            return httpx.Response(200, json=WIKI_PAYLOAD)

        result = await WebSearchTool(transport=_transport(handler)).execute("latest news")
        assert result.startswith('Search Results for: "latest news"')

    @pytest.mark.asyncio
    async def test_news_array_body_falls_back_to_wikipedia(self):
        def handler(request):
            if request.url.host == "api.nytimes.com":
                return httpx.Response(200, json=[1, 2])
            return httpx.Response(200, json=WIKI_PAYLOAD)

        result = await WebSearchTool(transport=_transport(handler)).execute("latest news")
        assert "1. Python (programming language)" in result

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>captive portal</html>"),
        httpx.Response(200, json=[1, 2]),
        httpx.Response(200, json={"query": [1, 2]}),
    ])
    async def test_unusable_wikipedia_body_returned_as_string(self, response):
        result = await WebSearchTool(transport=_transport(lambda request: response)).execute("python")
        assert result.startswith("Error performing web search:")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [3, 3.0, "3", " 3 "])
    async def test_limit_accepts_numeric_forms(self, limit):
        seen = []

        def handler(request):
            seen.append(request.url.params["srlimit"])
            return httpx.Response(200, json=WIKI_PAYLOAD)

        await WebSearchTool(transport=_transport(handler)).execute("python", limit)
        assert seen == ["3"]

    @pytest.mark.asyncio
    async def test_non_numeric_limit_raises(self):
        with pytest.raises(ValueError, match="limit must be a number"):
            await WebSearchTool().execute("python", "many")

    def test_limit_schema_accepts_float_and_string(self):
        tool = WebSearchTool()
        assert tool.validate_args(["python", 3.0]) == []
        assert tool.validate_args(["python", "3"]) == []
