"""Copy chosen storage items of a live chain into the genesis spec of a fork."""

from __future__ import annotations

import argparse
import json
import logging
import urllib.request
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .twox import twox_128

log = logging.getLogger(__name__)

CODE_PREFIX = "0x3a636f6465"
DEFAULT_PREFIXES = ("Aura, Aleph",)


@dataclass
class ForkOffConfig:
    """Options of the fork-off command."""

    http_rpc_endpoint: str = "http://127.0.0.1:9933"
    fork_spec_path: str = "../docker/data/chainspec.json"
    write_to_path: str = "../docker/data/chainspec.fork.json"
    prefixes: list[str] = field(default_factory=lambda: list(DEFAULT_PREFIXES))


def _parser() -> argparse.ArgumentParser:
    defaults = ForkOffConfig()
    parser = argparse.ArgumentParser(prog="fork-off")
    parser.add_argument("--version", action="version", version="1.0")
    parser.add_argument(
        "--http-rpc-endpoint",
        default=defaults.http_rpc_endpoint,
        help="URL address of the node RPC endpoint for the chain you are forking",
    )
    parser.add_argument(
        "--fork-spec-path",
        default=defaults.fork_spec_path,
        help="path of the initial chainspec of the fork",
    )
    parser.add_argument(
        "--write-to-path",
        default=defaults.write_to_path,
        help="where to write the forked genesis chainspec",
    )
    parser.add_argument(
        "--prefixes",
        nargs="+",
        action="extend",
        default=None,
        help="which modules to set in forked spec",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> ForkOffConfig:
    """Parse command-line arguments into a ForkOffConfig."""
    namespace = _parser().parse_args(argv)
    prefixes = namespace.prefixes if namespace.prefixes is not None else list(DEFAULT_PREFIXES)
    return ForkOffConfig(
        http_rpc_endpoint=namespace.http_rpc_endpoint,
        fork_spec_path=namespace.fork_spec_path,
        write_to_path=namespace.write_to_path,
        prefixes=prefixes,
    )


def prefix_as_hex(module: str) -> str:
    """Hex form of the 128-bit twox hash of a module name."""
    return twox_128(module.encode("utf-8")).hex()


def _storage_key(pair: Any) -> str:
    if not isinstance(pair, (list, tuple)) or len(pair) < 2 or not isinstance(pair[0], str):
        raise ValueError(f"storage entry must be a [key, value] pair, got {pair!r}")
    return pair[0]


def select_storage(storage: Iterable[Any], prefixes: Iterable[str]) -> list:
    """Return the storage pairs whose keys fall under one of the prefixes or the code key."""
    candidates = [prefix_as_hex(prefix) for prefix in prefixes]
    candidates.append(CODE_PREFIX)
    key_prefixes = tuple(f"0x{prefix_as_hex(candidate)}" for candidate in candidates)
    return [pair for pair in storage if _storage_key(pair).startswith(key_prefixes)]


def _child_object(parent: dict, key: str) -> dict:
    child = parent.get(key)
    if child is None:
        child = parent[key] = {}
    if not isinstance(child, dict):
        raise TypeError(f"chainspec entry {key!r} is not an object")
    return child


def apply_fork(fork_spec: Any, storage: Iterable[Any], prefixes: Iterable[str]) -> Any:
    """Move the selected storage pairs into ``genesis.raw.top`` of the spec and return it."""
    if not isinstance(fork_spec, dict):
        raise TypeError("chainspec is not an object")
    prefixes = list(prefixes)
    log.info("Looking for the following storage items to be moved to the fork: %s", prefixes)
    top = _child_object(_child_object(_child_object(fork_spec, "genesis"), "raw"), "top")
    for key, value in select_storage(storage, prefixes):
        log.info("Moving %s to the fork", key)
        top[key] = value
    return fork_spec


def get_chain_state(http_rpc_endpoint: str) -> list:
    """Fetch all storage pairs of the chain through the ``state_getPairs`` RPC call."""
    payload = {"jsonrpc": "2.0", "id": 1, "method": "state_getPairs", "params": ["0x"]}
    request = urllib.request.Request(
        http_rpc_endpoint,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(request) as response:
        body = response.read()
    try:
        reply = json.loads(body)
    except ValueError as error:
        raise ValueError("Could not deserialize response as JSON") from error
    result = reply.get("result") if isinstance(reply, dict) else None
    if not isinstance(result, list):
        raise ValueError("No result in response")
    return result


def write_to_file(write_to_path: str | Path, data: bytes) -> None:
    """Write ``data`` to the file, creating or truncating it."""
    Path(write_to_path).write_bytes(data)


def main(argv: Sequence[str] | None = None) -> int:
    config = parse_args(argv)
    logging.basicConfig()
    log.info(
        "Running with config: \n\thttp_rpc_endpoint %s\n \tfork_spec_path: %s\n \twrite_to_path%s",
        config.http_rpc_endpoint,
        config.fork_spec_path,
        config.write_to_path,
    )

    fork_spec = json.loads(Path(config.fork_spec_path).read_text(encoding="utf-8"))
    storage = get_chain_state(config.http_rpc_endpoint)
    log.info("Succesfully retrieved chain state")

    apply_fork(fork_spec, storage, config.prefixes)

    text = json.dumps(fork_spec, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    log.info("Writing forked chain spec to %s", config.write_to_path)
    write_to_file(config.write_to_path, text.encode("utf-8"))
    log.info("Done!")
    return 0