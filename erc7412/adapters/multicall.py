# adapters/multicall.py
from typing import List
from web3 import AsyncWeb3
from eth_abi import encode

from erc7412.ports import Call

# Synthetix TrustedMulticallForwarder, same address on every chain it is deployed to.
# Unlike Multicall3 it bubbles up the inner revert data, which the resolver needs.
TRUSTED_MULTICALL_FORWARDER = "0xE2C5658cC5C448B48141168f3e475dF8f65A1e3e"
# method: aggregate3Value((address target, bool allowFailure, uint256 value, bytes callData)[] calls)
AGGREGATE3_VALUE_SELECTOR = AsyncWeb3.keccak(text="aggregate3Value((address,bool,uint256,bytes)[])")[:4]


def _encode_aggregate3_value(calls: List[Call], allow_failure: bool = False) -> bytes:
    values = [[(AsyncWeb3.to_checksum_address(c.to), allow_failure, int(c.value), bytes(c.data)) for c in calls]]
    return AGGREGATE3_VALUE_SELECTOR + encode(["(address,bool,uint256,bytes)[]"], values)


class MulticallAggregator:
    """
    Aggregator for the resolver: the whole batch becomes one aggregate3Value call whose
    msg.value covers every inner call.
    """

    def __init__(self, address: str = TRUSTED_MULTICALL_FORWARDER):
        self.address = AsyncWeb3.to_checksum_address(address)

    def __call__(self, calls: List[Call]) -> Call:
        if not calls:
            raise ValueError("MulticallAggregator: empty batch")
        return Call(
            to=self.address,
            data=_encode_aggregate3_value(calls),
            value=sum(int(c.value) for c in calls),
        )
