import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from web3.exceptions import ContractLogicError

from erc7412.adapters.default_oracle import DefaultAdapter
from erc7412.adapters.multicall import MulticallAggregator, TRUSTED_MULTICALL_FORWARDER
from erc7412.adapters.node_pool import Web3NodePool
from erc7412.adapters.web3_client import Web3ChainClient
from erc7412.config import AppConfig, load_env
from erc7412.core.log import setup_logging
from erc7412.errors import ERC7412Error
from erc7412.ports import Call
from erc7412.services.resolver import EIP7412Resolver
from erc7412.utils.parsing import parse_hex

log = logging.getLogger("main")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Resolve ERC-7412 oracle requirements of a call into one multicall")
    p.add_argument("--to", required=True)
    p.add_argument("--data", default="0x")
    p.add_argument("--value", type=int, default=0)
    p.add_argument("--from", dest="sender")
    p.add_argument("--rpc")
    p.add_argument("--oracle", action="append", default=[], metavar="ID=URL")
    p.add_argument("--max-iterations", type=int)
    p.add_argument("--debug", action="store_true")
    return p.parse_args(argv)


def apply_args(cfg: AppConfig, a: argparse.Namespace) -> AppConfig:
    update: dict = {}
    if a.rpc:
        update["rpc_url"] = a.rpc
    if a.sender:
        update["sender"] = a.sender
    if a.oracle:
        update["oracles"] = ",".join(x for x in [cfg.oracles, *a.oracle] if x)
    if a.max_iterations is not None:
        update["max_iterations"] = a.max_iterations
    if a.debug:
        update["debug"] = True
    return cfg.model_copy(update=update)


def call_to_json(call: Call) -> dict:
    return {"to": call.to, "data": "0x" + bytes(call.data).hex(), "value": str(call.value)}


async def run(cfg: AppConfig, call: Call) -> Call:
    node_pool = Web3NodePool([cfg.rpc_url] + list(cfg.rpc_pool or []), request_timeout=cfg.call_timeout)
    client = Web3ChainClient(
        node_pool=node_pool,
        retries=cfg.max_retries,
        base_delay=cfg.retry_base_delay,
        call_timeout=cfg.call_timeout,
        sender=cfg.sender,
    )
    adapters = [DefaultAdapter(oracle_id, url) for oracle_id, url in cfg.oracle_urls().items()]
    resolver = EIP7412Resolver(
        adapters,
        MulticallAggregator(cfg.multicall_address or TRUSTED_MULTICALL_FORWARDER),
        max_iterations=cfg.max_iterations or None,
    )
    log.info("Oracles: %s | RPC nodes: %d", ",".join(resolver.registry.oracle_ids) or "-", len(node_pool))
    try:
        return await resolver.resolve(client, call)
    finally:
        await node_pool.aclose()


def main(argv: Optional[list[str]] = None) -> int:
    a = parse_args(argv)
    cfg = apply_args(load_env(), a)
    setup_logging(cfg.debug, cfg.log_file)

    call = Call(to=a.to, data=parse_hex(a.data), value=a.value)
    try:
        result = asyncio.run(run(cfg, call))
    except ERC7412Error as e:
        log.error("%s", e)
        return 1
    except ContractLogicError as e:
        log.error("call reverted with an error the resolver does not handle: %s (data=%s)", e, e.data)
        return 1
    print(json.dumps(call_to_json(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
