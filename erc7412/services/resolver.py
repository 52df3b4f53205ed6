# services/resolver.py
from __future__ import annotations
import logging
from itertools import count
from time import monotonic
from typing import Iterable, Optional

from erc7412.errors import ResolutionLimitExceeded
from erc7412.ierc7412 import encode_fulfill_oracle_query, decode_oracle_id
from erc7412.ports import Aggregator, Call, ChainClient, OracleAdapter
from erc7412.services.classifier import (
    FeeRequired, OracleDataRequired, RevertDataExtractor, classify,
)
from erc7412.services.registry import OracleAdapterRegistry
from erc7412.utils.parsing import extract_revert_data

log = logging.getLogger("resolver")

DEFAULT_MAX_ITERATIONS = 32


class EIP7412Resolver:
    """
    Turns a call that reverts with OracleDataRequired / FeeRequired into a multicall that
    succeeds: simulate, decode the revert, add the missing fulfillment (or its fee), repeat.

    The batch always ends with the user's call. Fulfillment calls go right before it, in the
    order they were discovered, so the newest one is second-to-last and is the one a
    FeeRequired refers to.
    """

    def __init__(
            self,
            adapters: Iterable[OracleAdapter],
            aggregate: Aggregator,
            max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
            extract: RevertDataExtractor = extract_revert_data,
    ) -> None:
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1 or None, got {max_iterations}")
        self.registry = OracleAdapterRegistry(adapters)
        self._aggregate = aggregate
        self._max_iterations = max_iterations
        self._extract = extract

    async def resolve(self, client: ChainClient, call: Call) -> Call:
        batch: list[Call] = [call]
        last_fulfillment: Optional[Call] = None
        start = monotonic()

        for round_no in count(1):
            if self._max_iterations is not None and round_no > self._max_iterations:
                raise ResolutionLimitExceeded(self._max_iterations, batch)

            multicall = self._aggregate(batch)
            log.debug("round %d: simulating batch of %d calls", round_no, len(batch))
            try:
                await client.simulate(multicall)
            except Exception as e:
                failure = classify(e, self._extract)

                if isinstance(failure, OracleDataRequired):
                    fulfillment = await self._fulfillment_call(client, failure)
                    fulfillment.origin = failure
                    batch.insert(len(batch) - 1, fulfillment)
                    last_fulfillment = fulfillment
                elif isinstance(failure, FeeRequired):
                    if last_fulfillment is None:
                        log.warning("FeeRequired(%d) before any oracle fulfillment, nothing to pay it with",
                                    failure.required_fee)
                        raise
                    log.info("fee %d wei for oracle %s", failure.required_fee, last_fulfillment.to)
                    last_fulfillment.value = failure.required_fee
                else:
                    raise
            else:
                log.info("resolved with %d fulfillment calls in %d rounds (%.2fs)",
                         len(batch) - 1, round_no, monotonic() - start)
                return multicall

    async def _fulfillment_call(self, client: ChainClient, failure: OracleDataRequired) -> Call:
        oracle_id = decode_oracle_id(await client.read_oracle_id(failure.oracle_address))
        adapter = self.registry.lookup(oracle_id)
        log.info("oracle %s [%s] requires offchain data (query 0x%s)",
                 oracle_id, failure.oracle_address, failure.oracle_query.hex()[:64])

        signed = await adapter.fetch_offchain_data(client, failure.oracle_address, failure.oracle_query)
        return Call(
            to=failure.oracle_address,
            data=encode_fulfill_oracle_query(failure.oracle_query, signed),
        )
