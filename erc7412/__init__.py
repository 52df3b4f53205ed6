from erc7412.ports import Call, ChainClient, OracleAdapter, Aggregator
from erc7412.errors import ERC7412Error, OracleNotSupportedError, ResolutionLimitExceeded, OffchainDataError
from erc7412.services.classifier import classify, OracleDataRequired, FeeRequired, Unrecognized
from erc7412.services.registry import OracleAdapterRegistry
from erc7412.services.resolver import EIP7412Resolver
from erc7412.utils.parsing import extract_revert_data
from erc7412.adapters.default_oracle import DefaultAdapter
from erc7412.adapters.multicall import MulticallAggregator

__all__ = [
    "Call", "ChainClient", "OracleAdapter", "Aggregator",
    "ERC7412Error", "OracleNotSupportedError", "ResolutionLimitExceeded", "OffchainDataError",
    "classify", "OracleDataRequired", "FeeRequired", "Unrecognized",
    "OracleAdapterRegistry", "EIP7412Resolver", "extract_revert_data",
    "DefaultAdapter", "MulticallAggregator",
]
