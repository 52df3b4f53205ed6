# services/classifier.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Union

from web3 import AsyncWeb3
from eth_abi import decode
from eth_abi.exceptions import DecodingError

from erc7412.ierc7412 import ORACLE_DATA_REQUIRED_SELECTOR, FEE_REQUIRED_SELECTOR
from erc7412.utils.parsing import extract_revert_data

log = logging.getLogger("classifier")


@dataclass(frozen=True)
class OracleDataRequired:
    oracle_address: str
    oracle_query: bytes


@dataclass(frozen=True)
class FeeRequired:
    required_fee: int


@dataclass(frozen=True)
class Unrecognized:
    cause: BaseException


DecodedFailure = Union[OracleDataRequired, FeeRequired, Unrecognized]
RevertDataExtractor = Callable[[BaseException], bytes]


def decode_revert_data(data: bytes) -> Union[OracleDataRequired, FeeRequired, None]:
    selector, body = bytes(data[:4]), bytes(data[4:])
    try:
        if selector == ORACLE_DATA_REQUIRED_SELECTOR:
            address, query = decode(["address", "bytes"], body)
            return OracleDataRequired(AsyncWeb3.to_checksum_address(address), bytes(query))
        if selector == FEE_REQUIRED_SELECTOR:
            (fee,) = decode(["uint256"], body)
            return FeeRequired(int(fee))
    except DecodingError as e:
        log.debug("selector 0x%s matched but arguments did not decode: %r", selector.hex(), e)
    return None


def classify(failure: BaseException, extract: RevertDataExtractor = extract_revert_data) -> DecodedFailure:
    """
    Maps a failed simulation onto the IERC7412 errors.
    Extraction failures are raised by `extract` itself and are not turned into Unrecognized.
    """
    data = extract(failure)
    decoded = decode_revert_data(data)
    if decoded is None:
        return Unrecognized(failure)
    return decoded
