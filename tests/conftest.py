import os
import sys
import asyncio
import httpx
import pytest

# Ensure project root is on sys.path for imports like `core.*`
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)

DOH_HOST = "dns.google"


def doh_answer(record_type, *data):
    """A DNS-over-HTTPS JSON payload as dns.google returns it."""
    codes = {"A": 1, "NS": 2, "CNAME": 5, "MX": 15, "TXT": 16}
    return {
        "Status": 0,
        "Answer": [{"name": "example.com.", "type": codes[record_type], "TTL": 300, "data": d} for d in data],
    }


@pytest.fixture
def site_transport():
    """Build an httpx.MockTransport from route tables.

    pages maps a URL path to an httpx.Response, a status code, or an
    (optionally async) callable taking the request. dns maps a record type
    to a JSON payload or a status code. Unknown routes answer 404.
    """
    def build(pages=None, dns=None, delay=None):
        pages = pages or {}
        dns = dns or {}

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == DOH_HOST:
                answer = dns.get(request.url.params.get("type"), {"Status": 0})
                if isinstance(answer, int):
                    return httpx.Response(answer, text="upstream error")
                if isinstance(answer, str):
                    return httpx.Response(200, text=answer)
                return httpx.Response(200, json=answer)

            route = pages.get(request.url.path, 404)
            if delay and request.url.path in delay:
                await asyncio.sleep(delay[request.url.path])
            if callable(route):
                result = route(request)
                if asyncio.iscoroutine(result):
                    result = await result
                return result
            if isinstance(route, int):
                return httpx.Response(route)
            return route

        return httpx.MockTransport(handler)

    return build
