import pytest
from aiohttp import web
from aiohttp import test_utils

from erc7412.adapters.default_oracle import DefaultAdapter
from erc7412.errors import OffchainDataError

from ._helpers import ORACLE_A


def make_app(handler) -> web.Application:
    app = web.Application()
    app.router.add_get("/v1/{query}", handler)
    return app


class TestDefaultAdapter:
    def test_oracle_id(self):
        assert DefaultAdapter("PYTH", "https://example.com/").get_oracle_id() == "PYTH"

    @pytest.mark.asyncio
    async def test_plain_text_payload(self):
        seen = []

        async def handler(request):
            seen.append(request.match_info["query"])
            return web.Response(text="0xc0ffee\n")

        async with test_utils.TestServer(make_app(handler)) as server:
            adapter = DefaultAdapter("PYTH", str(server.make_url("/v1/")))
            data = await adapter.fetch_offchain_data(None, ORACLE_A, b"\x01\x02")

        assert data == b"\xc0\xff\xee"
        assert seen == ["0x0102"]

    @pytest.mark.asyncio
    async def test_json_payload(self):
        async def handler(request):
            return web.json_response({"data": "0xabcd"})

        async with test_utils.TestServer(make_app(handler)) as server:
            adapter = DefaultAdapter("PYTH", str(server.make_url("/v1")))
            assert await adapter.fetch_offchain_data(None, ORACLE_A, b"\x05") == b"\xab\xcd"

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        calls = []

        async def handler(request):
            calls.append(1)
            if len(calls) < 2:
                return web.Response(status=503)
            return web.Response(text="0x01")

        async with test_utils.TestServer(make_app(handler)) as server:
            adapter = DefaultAdapter("PYTH", str(server.make_url("/v1")), retries=2, base_delay=0)
            assert await adapter.fetch_offchain_data(None, ORACLE_A, b"\x05") == b"\x01"

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_http_error_after_retries(self):
        async def handler(request):
            return web.Response(status=500)

        async with test_utils.TestServer(make_app(handler)) as server:
            adapter = DefaultAdapter("PYTH", str(server.make_url("/v1")), retries=1, base_delay=0)
            with pytest.raises(OffchainDataError, match="http=500"):
                await adapter.fetch_offchain_data(None, ORACLE_A, b"\x05")

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        async def handler(request):
            return web.json_response({"error": "unknown feed"})

        async with test_utils.TestServer(make_app(handler)) as server:
            adapter = DefaultAdapter("PYTH", str(server.make_url("/v1")), retries=0)
            with pytest.raises(OffchainDataError, match="no hex payload"):
                await adapter.fetch_offchain_data(None, ORACLE_A, b"\x05")
