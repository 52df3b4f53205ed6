import logging
from typing import Iterable

from erc7412.errors import OracleNotSupportedError
from erc7412.ports import OracleAdapter

log = logging.getLogger("registry")


class OracleAdapterRegistry:
    """
    oracle id -> adapter. Built once, read-only afterwards.
    A repeated oracle id replaces the earlier adapter (last one wins).
    """

    def __init__(self, adapters: Iterable[OracleAdapter]) -> None:
        self._adapters: dict[str, OracleAdapter] = {}
        for adapter in adapters:
            oracle_id = adapter.get_oracle_id()
            if oracle_id in self._adapters:
                log.warning(f"adapter for oracle {oracle_id!r} registered twice, keeping the last one")
            self._adapters[oracle_id] = adapter

    @property
    def oracle_ids(self) -> list[str]:
        return list(self._adapters)

    def lookup(self, oracle_id: str) -> OracleAdapter:
        adapter = self._adapters.get(oracle_id)
        if adapter is None:
            raise OracleNotSupportedError(oracle_id, self.oracle_ids)
        return adapter

    def __contains__(self, oracle_id: object) -> bool:
        return oracle_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
