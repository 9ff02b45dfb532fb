"""
网页工具模块 (agent/tools/web.py)

模块职责：
    提供两个网页相关工具，赋予 Agent 访问互联网信息的能力：
      - FetchURLTool: 抓取 URL 的原始正文（截断到固定长度）
      - WebSearchTool: 免费搜索接口（新闻类查询优先 NYT，其余走 Wikipedia）

技术选型：
    - HTTP 客户端：httpx（异步，类似 Java 的 OkHttp）
    - 搜索源：NYT Article Search API（新闻）+ Wikipedia Search API（通用知识）
    - 测试时可以注入 httpx.MockTransport，无需真实网络

错误约定：
    与其他工具不同，网络错误和 HTTP 错误不抛出，而是以描述性字符串返回，
    这样模型仍然能看到失败原因。

安全设计：
    - URL 校验：只允许 http/https 协议，防止 file:// 等协议泄露本地文件
    - 重定向限制：最多 5 次重定向
    - 超时保护：搜索 / 抓取超时由配置决定（默认 10 秒 / 30 秒）
"""

import html
import re
from datetime import datetime
from typing import Any
from urllib.parse import quote, urlparse

import httpx
from loguru import logger

from cliagent.agent.tools.base import Tool

# 共享常量
USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_7_2) AppleWebKit/537.36"  # 模拟浏览器请求头
MAX_REDIRECTS = 5

NYT_SEARCH_URL = "https://api.nytimes.com/svc/search/v2/articlesearch.json"
WIKI_SEARCH_URL = "https://en.wikipedia.org/w/api.php"
WIKI_ARTICLE_URL = "https://en.wikipedia.org/wiki/"
NEWS_KEYWORDS = ("news", "latest", "current events")


def _strip_tags(text: str) -> str:
    """
    去除 HTML 标签并解码 HTML 实体。

    处理顺序：先移除 script/style 标签及其内容，再移除所有其他标签，最后解码实体。
    """
    text = re.sub(r'<script[\s\S]*?</script>', '', text, flags=re.I)
    text = re.sub(r'<style[\s\S]*?</style>', '', text, flags=re.I)
    text = re.sub(r'<[^>]+>', '', text)
    return html.unescape(text).strip()


def _validate_url(url: str) -> tuple[bool, str]:
    """
    校验 URL：只允许 http 和 https 协议，且必须有域名。

    返回:
        tuple[bool, str]: (是否合法, 错误信息)
    """
    try:
        p = urlparse(url)
        if p.scheme not in ('http', 'https'):
            return False, f"Only http/https allowed, got '{p.scheme or 'none'}'"
        if not p.netloc:
            return False, "Missing domain"
        return True, ""
    except ValueError as e:
        return False, str(e)


def _format_pub_date(value: str | None) -> str:
    """把 NYT 的 ISO 发布时间格式化为 "Tue Oct 19 2026"，解析失败时返回 Unknown date。"""
    if not value:
        return "Unknown date"
    try:
        return datetime.fromisoformat(value).strftime("%a %b %d %Y")
    except ValueError:
        return "Unknown date"


def _json_object(r: httpx.Response) -> dict[str, Any]:
    """解析响应体为 JSON 对象；不是 JSON 或顶层不是对象时抛出 ValueError。"""
    data = r.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _to_limit(value: Any) -> int | None:
    """把 3 / 3.0 / "3" 转换为整数结果数量，None 表示使用默认值。"""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("limit must be a number")
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        raise ValueError(f"limit must be a number, got {value!r}") from None


class FetchURLTool(Tool):
    """
    网页抓取工具，返回响应正文（不做正文提取），超长时截断并注明总长度。

    类比 Java: 类似于 HttpClient.send() 后取 body 字符串。
    """

    name = "fetchURL"
    description = "Fetch the raw content of an http/https URL (truncated to a fixed length)."
    parameters = {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "URL to fetch"}
        },
        "required": ["url"]
    }

    def __init__(
        self,
        max_chars: int = 1000,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        参数:
            max_chars: 返回内容的最大字符数，超出则截断
            timeout: 请求超时（秒）
            transport: 可选的 httpx 传输层（测试时注入 MockTransport）
        """
        self.max_chars = max_chars
        self.timeout = timeout
        self._transport = transport

    async def execute(self, url: str, **kwargs: Any) -> str:
        is_valid, error_msg = _validate_url(url)
        if not is_valid:
            return f"Error: URL must be a valid HTTP/HTTPS URL ({error_msg})"

        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                r = await client.get(url, headers={"User-Agent": USER_AGENT})
            if r.is_error:
                return f"Error: HTTP request failed with status {r.status_code}"
            text = r.text
        except httpx.HTTPError as e:
            logger.warning(f"fetchURL failed for {url}: {e}")
            return f"Error fetching URL: {e}"

        if len(text) > self.max_chars:
            return f"{text[:self.max_chars]}... (truncated, total length: {len(text)})"
        return text


class WebSearchTool(Tool):
    """
    网页搜索工具。

    查询包含 news / latest / current events 时先查 NYT 文章搜索，
    没有结果（或请求失败）时回落到 Wikipedia 搜索。
    """

    name = "webSearch"
    description = "Search the web (news via NYT, general knowledge via Wikipedia). Returns titles, snippets and URLs."
    parameters = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query", "minLength": 1},
            "limit": {"type": ["integer", "number", "string"], "description": "Results (1-10, default 5)"}
        },
        "required": ["query"]
    }

    def __init__(
        self,
        max_results: int = 5,
        timeout: float = 10.0,
        news_api_key: str = "demo",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        参数:
            max_results: 默认返回结果数量
            timeout: 请求超时（秒）
            news_api_key: NYT API 密钥（公共 demo 密钥有严格限流）
            transport: 可选的 httpx 传输层（测试时注入 MockTransport）
        """
        self.max_results = max_results
        self.timeout = timeout
        self.news_api_key = news_api_key
        self._transport = transport

    async def execute(self, query: str, limit: Any = None, **kwargs: Any) -> str:
        if not query.strip():
            return "Error: Search query must be a non-empty string"

        # 限制结果数量在 1-10 之间
        n = min(max(_to_limit(limit) or self.max_results, 1), 10)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                if any(k in query.lower() for k in NEWS_KEYWORDS):
                    news = await self._search_news(client, query, n)
                    if news:
                        return news
                wiki = await self._search_wikipedia(client, query, n)
                if wiki:
                    return wiki
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"webSearch failed for '{query}': {e}")
            return (f"Error performing web search: {e}\n\n"
                    "Try a different search query or use fetchURL to directly access websites.")

        return f'No search results found for query: "{query}"\n\nTry a different search query or be more specific.'

    async def _search_news(self, client: httpx.AsyncClient, query: str, n: int) -> str | None:
        """查询 NYT 文章搜索，没有结果或请求失败时返回 None。"""
        try:
            r = await client.get(NYT_SEARCH_URL, params={"q": query, "api-key": self.news_api_key})
        except httpx.HTTPError as e:
            logger.debug(f"News search failed, falling back to Wikipedia: {e}")
            return None
        if r.is_error:
            logger.debug(f"News search returned {r.status_code}, falling back to Wikipedia")
            return None

        try:
            docs = (_json_object(r).get("response") or {}).get("docs") or []
        except (ValueError, AttributeError) as e:
            logger.debug(f"News search returned an unusable body, falling back to Wikipedia: {e}")
            return None
        if not docs:
            return None

        lines = [f'News Search Results for: "{query}"\n']
        for i, article in enumerate(docs[:n], 1):
            headline = (article.get("headline") or {}).get("main") or "News article"
            summary = article.get("abstract") or article.get("snippet") or article.get("lead_paragraph") or ""
            lines.append(f"{i}. {headline}")
            lines.append(f"   {summary}")
            lines.append(f"   Published: {_format_pub_date(article.get('pub_date'))}")
            lines.append(f"   URL: {article.get('web_url', '')}\n")
        return "\n".join(lines)

    async def _search_wikipedia(self, client: httpx.AsyncClient, query: str, n: int) -> str | None:
        """查询 Wikipedia 搜索接口，没有结果时返回 None（HTTP 层错误和无法解析的响应体向上抛出）。"""
        r = await client.get(WIKI_SEARCH_URL, params={
            "action": "query",
            "format": "json",
            "list": "search",
            "utf8": 1,
            "srsearch": query,
            "srlimit": n,
        }, headers={"User-Agent": USER_AGENT})
        if r.is_error:
            logger.debug(f"Wikipedia search returned {r.status_code}")
            return None

        try:
            results = (_json_object(r).get("query") or {}).get("search") or []
        except AttributeError as e:
            raise ValueError(f"unexpected Wikipedia response: {e}") from e
        if not results:
            return None

        lines = [f'Search Results for: "{query}"\n']
        for i, item in enumerate(results[:n], 1):
            title = item.get("title", "")
            lines.append(f"{i}. {title}")
            lines.append(f"   {_strip_tags(item.get('snippet', ''))}")
            lines.append(f"   URL: {WIKI_ARTICLE_URL}{quote(title.replace(' ', '_'))}\n")
        return "\n".join(lines)
