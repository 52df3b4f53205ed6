# ierc7412.py
from web3 import AsyncWeb3
from eth_abi import encode

# error OracleDataRequired(address oracleContract, bytes oracleQuery)
ORACLE_DATA_REQUIRED_SELECTOR = AsyncWeb3.keccak(text="OracleDataRequired(address,bytes)")[:4]
# error FeeRequired(uint256 feeAmount)
FEE_REQUIRED_SELECTOR = AsyncWeb3.keccak(text="FeeRequired(uint256)")[:4]
# function fulfillOracleQuery(bytes oracleQuery, bytes signedOffchainData) payable
FULFILL_ORACLE_QUERY_SELECTOR = AsyncWeb3.keccak(text="fulfillOracleQuery(bytes,bytes)")[:4]

IERC7412_ABI_MIN = [
    {"inputs": [], "name": "oracleId", "outputs": [{"name": "", "type": "bytes32"}],
     "stateMutability": "view", "type": "function"},
]


def encode_fulfill_oracle_query(oracle_query: bytes, signed_offchain_data: bytes) -> bytes:
    return FULFILL_ORACLE_QUERY_SELECTOR + encode(["bytes", "bytes"], [oracle_query, signed_offchain_data])


def decode_oracle_id(raw: bytes) -> str:
    """bytes32 oracleId() -> text, right padding dropped"""
    return bytes(raw).rstrip(b"\x00").decode("utf-8", errors="replace")
