import asyncio
import logging
from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

log = logging.getLogger("node_pool")


class Web3NodePool:
    """
    RPC endpoints the chain client spreads its simulations and oracleId() reads over.
    Every resolution round may land on a different node; reads are stateless, so any
    node at the same head answers the same.
    """

    def __init__(self, urls: list[str], request_timeout: float = 8.0) -> None:
        urls = [u.strip() for u in urls if u and u.strip()]
        if not urls:
            raise ValueError("Web3NodePool: no RPC endpoints configured (RPC_URL / RPC_POOL)")
        self.urls = list(dict.fromkeys(urls))

        self._timeout = float(request_timeout)
        self._clients: list[AsyncWeb3] = [
            AsyncWeb3(AsyncHTTPProvider(u, request_kwargs={"timeout": self._timeout}))
            for u in self.urls
        ]
        self._rr = 0
        self._lock = asyncio.Lock()
        log.info(f"simulating against {len(self._clients)} RPC node(s) (timeout={self._timeout:.1f}s)")

    def __len__(self) -> int:
        return len(self._clients)

    async def next_client(self) -> AsyncWeb3:
        async with self._lock:
            c = self._clients[self._rr % len(self._clients)]
            self._rr += 1
            return c

    async def aclose(self) -> None:
        for c in self._clients:
            disconnect = getattr(c.provider, "disconnect", None)
            if disconnect is not None:
                await disconnect()
        log.debug("RPC provider sessions closed")
