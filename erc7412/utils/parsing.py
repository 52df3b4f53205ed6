import logging
import re
from typing import Any, Optional

from hexbytes import HexBytes

log = logging.getLogger("parsing")

HEX_RE = re.compile(r"^0x(?:[a-fA-F0-9]{2})*$")
MAX_CAUSE_DEPTH = 16


def parse_hex(value: str) -> bytes:
    """'0x..' -> bytes; ValueError on anything else"""
    value = (value or "").strip()
    if not HEX_RE.match(value):
        raise ValueError(f"not a 0x-prefixed hex string: {value[:80]!r}")
    return bytes(HexBytes(value))


def _as_payload(data: Any) -> Optional[bytes]:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str) and HEX_RE.match(data):
        return bytes(HexBytes(data))
    if isinstance(data, dict):
        # some nodes wrap it once more: {"message": ..., "data": "0x..."}
        return _as_payload(data.get("data"))
    return None


def _payload_of(node: Any) -> Optional[bytes]:
    found = _as_payload(getattr(node, "data", None))
    if found is not None:
        return found

    error = getattr(node, "error", None)
    if error is not None and not isinstance(error, BaseException):
        found = _as_payload(getattr(error, "data", error))
        if found is not None:
            return found

    rpc = getattr(node, "rpc_response", None)
    if isinstance(rpc, dict) and isinstance(rpc.get("error"), dict):
        found = _as_payload(rpc["error"].get("data"))
        if found is not None:
            return found

    args = getattr(node, "args", None) or ()
    if args and isinstance(args[0], dict):
        return _as_payload(args[0])
    return None


def _next_in_chain(node: Any) -> Any:
    if getattr(node, "__cause__", None) is not None:
        return node.__cause__
    if getattr(node, "cause", None) is not None:
        return node.cause
    if isinstance(getattr(node, "error", None), BaseException):
        return node.error
    # implicit context only counts when the raised error carries nothing itself
    if getattr(node, "__suppress_context__", False) or _payload_of(node) is not None:
        return None
    return getattr(node, "__context__", None)


def _cause_chain(error: BaseException) -> list:
    chain, seen, node = [], set(), error
    while node is not None and id(node) not in seen and len(chain) < MAX_CAUSE_DEPTH:
        seen.add(id(node))
        chain.append(node)
        node = _next_in_chain(node)
    return chain


def extract_revert_data(error: BaseException) -> bytes:
    """
    Finds the raw revert payload of a failed call.

    Client wrappers (web3 exceptions, RPC errors, user wrappers raising `from`) nest the
    node's answer at different depths, so the explicit cause chain is walked and the innermost
    payload wins; the outer error's own `data` is the fallback. An exception that was merely
    being handled (`__context__`) is only looked at when the raised one has no payload.
    If nothing in the chain carries a payload, the original error is logged and re-raised.
    """
    for node in reversed(_cause_chain(error)):
        payload = _payload_of(node)
        if payload is not None:
            return payload

    log.error("no revert data in %s: %r", type(error).__name__, error)
    raise error
