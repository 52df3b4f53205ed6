from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol


@dataclass
class Call:
    to: str
    data: bytes = b""
    value: int = 0
    # OracleDataRequired failure that caused a fulfillment call to be inserted
    origin: Optional[Any] = field(default=None, compare=False, repr=False)


class ChainClient(Protocol):
    async def simulate(self, call: Call) -> bytes: ...

    async def read_oracle_id(self, oracle_address: str) -> bytes: ...


class OracleAdapter(Protocol):
    def get_oracle_id(self) -> str: ...

    async def fetch_offchain_data(self, client: ChainClient, oracle_address: str, oracle_query: bytes) -> bytes: ...


Aggregator = Callable[[list[Call]], Call]
