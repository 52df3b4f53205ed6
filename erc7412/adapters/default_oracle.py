import asyncio
import logging

import aiohttp

from erc7412.errors import OffchainDataError
from erc7412.ports import ChainClient, OracleAdapter
from erc7412.utils.parsing import parse_hex

log = logging.getLogger("default_oracle")


class DefaultAdapter(OracleAdapter):
    """
    Oracle adapter for services that answer `GET {url}/{0x<oracleQuery>}` with the signed
    offchain data, either as a hex string body or as JSON: {"data": "0x..."}.
    """

    def __init__(self, oracle_id: str, url: str, retries: int = 2, base_delay: float = 0.5,
                 timeout: float = 30.0) -> None:
        self.oracle_id = oracle_id
        self.url = url.rstrip("/")
        self._retries = max(0, int(retries))
        self._base_delay = float(base_delay)
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def get_oracle_id(self) -> str:
        return self.oracle_id

    async def _fetch_once(self, url: str) -> bytes:
        async with aiohttp.ClientSession(timeout=self._timeout) as s:
            async with s.get(url) as r:
                if r.status != 200:
                    raise OffchainDataError(self.oracle_id, f"http={r.status} from {url}")
                if r.content_type == "application/json":
                    j = await r.json()
                    payload = j.get("data") if isinstance(j, dict) else None
                else:
                    payload = await r.text()
        if not isinstance(payload, str):
            raise OffchainDataError(self.oracle_id, "response has no hex payload")
        try:
            return parse_hex(payload)
        except ValueError as e:
            raise OffchainDataError(self.oracle_id, str(e)) from e

    async def fetch_offchain_data(self, client: ChainClient, oracle_address: str, oracle_query: bytes) -> bytes:
        url = f"{self.url}/0x{bytes(oracle_query).hex()}"
        for attempt in range(self._retries + 1):
            try:
                return await self._fetch_once(url)
            except (OffchainDataError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                if attempt >= self._retries:
                    if isinstance(e, OffchainDataError):
                        raise
                    raise OffchainDataError(self.oracle_id, repr(e)) from e
                delay = self._base_delay * (2 ** attempt)
                log.warning(f"{self.oracle_id}: fetch failed attempt={attempt + 1}/{self._retries} "
                            f"delay={delay:.2f}s err={e!r}")
                await asyncio.sleep(delay)
