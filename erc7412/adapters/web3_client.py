import asyncio
import logging
from typing import Optional

import aiohttp
from web3 import AsyncWeb3
from web3.types import TxParams

from erc7412.adapters.node_pool import Web3NodePool
from erc7412.ierc7412 import IERC7412_ABI_MIN
from erc7412.ports import Call, ChainClient

log = logging.getLogger("web3_client")

# Only the transport is retried; a revert is an answer and goes back to the caller as is.
TRANSIENT_ERRORS = (asyncio.TimeoutError, aiohttp.ClientError, ConnectionError)


class Web3ChainClient(ChainClient):
    def __init__(
            self,
            node_pool: Web3NodePool,
            retries: int = 1,
            base_delay: float = 0.25,
            call_timeout: float = 15.0,
            sender: Optional[str] = None,
    ) -> None:
        self._nodes = node_pool
        self._retries = max(0, int(retries))
        self._base_delay = float(base_delay)
        self._call_timeout = float(call_timeout)
        self._sender = AsyncWeb3.to_checksum_address(sender) if sender else None

    async def _retry(self, fn, label: str):
        for attempt in range(self._retries + 1):
            w3 = await self._nodes.next_client()
            try:
                return await asyncio.wait_for(fn(w3), timeout=self._call_timeout)
            except TRANSIENT_ERRORS as e:
                if attempt >= self._retries:
                    raise
                delay = self._base_delay * (2 ** attempt)
                log.info(f"retry {label} attempt={attempt + 1}/{self._retries} delay={delay:.2f}s err={e!r}")
                await asyncio.sleep(delay)

    def _tx_params(self, call: Call) -> TxParams:
        params: TxParams = {
            "to": AsyncWeb3.to_checksum_address(call.to),
            "data": bytes(call.data),
            "value": int(call.value),
        }
        if self._sender:
            params["from"] = self._sender
        return params

    async def simulate(self, call: Call) -> bytes:
        params = self._tx_params(call)

        async def _call(w3: AsyncWeb3):
            return await w3.eth.call(params)

        return bytes(await self._retry(_call, f"eth_call({params['to']})"))

    async def read_oracle_id(self, oracle_address: str) -> bytes:
        addr = AsyncWeb3.to_checksum_address(oracle_address)

        async def _oracle_id(w3: AsyncWeb3):
            return await w3.eth.contract(address=addr, abi=IERC7412_ABI_MIN).functions.oracleId().call()

        return bytes(await self._retry(_oracle_id, f"oracleId({addr})"))
