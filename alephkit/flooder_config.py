"""Command-line options of the transaction flooder."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

_U64_MAX = 2**64 - 1
DEFAULT_NODES = ("127.0.0.1:9944",)


@dataclass
class FlooderConfig:
    """Options of the flooder benchmark."""

    nodes: list[str] = field(default_factory=lambda: list(DEFAULT_NODES))
    transactions: int = 10000
    phrase: str | None = None
    seed: str | None = None
    skip_initialization: bool = False
    first_account_in_range: int = 0
    generate_txs: bool = False
    tx_store_path: str | None = None
    threads: int | None = None
    download_nonces: bool = False
    submit_only: bool = False
    store_txs: bool = False
    transactions_in_interval: int | None = None
    interval_secs: int | None = None

    def rate_limiting(self) -> tuple[int, int] | None:
        """Return (transactions per interval, interval seconds), or None when unlimited."""
        if self.transactions_in_interval is None and self.interval_secs is None:
            return None
        if self.transactions_in_interval is None or self.interval_secs is None:
            raise ValueError("--transactions-in-interval needs to be specified with --interval-secs")
        return self.transactions_in_interval, self.interval_secs


def _u64(text: str) -> int:
    try:
        value = int(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}") from error
    if not 0 <= value <= _U64_MAX:
        raise argparse.ArgumentTypeError(f"value out of range: {text!r}")
    return value


def _parser() -> argparse.ArgumentParser:
    defaults = FlooderConfig()
    parser = argparse.ArgumentParser(prog="flooder")
    parser.add_argument("--version", action="version", version="1.0")
    parser.add_argument("--nodes", nargs="+", action="extend", default=None,
                        help="URL address(es) of the nodes to send transactions to")
    parser.add_argument("--transactions", type=_u64, default=defaults.transactions,
                        help="how many transactions to send")
    secrets = parser.add_mutually_exclusive_group()
    secrets.add_argument("--phrase", help="secret phrase: a path to a file or the phrase itself")
    secrets.add_argument("--seed", help="secret seed of the account keypair")
    parser.add_argument("--skip-initialization", action="store_true",
                        help="skip accounts initialization and just download their nonces")
    parser.add_argument("--first-account-in-range", type=_u64, default=defaults.first_account_in_range,
                        help="beginning of the integer range used to derive accounts")
    parser.add_argument("--generate-txs", action="store_true", help="generate txs instead of reading them")
    parser.add_argument("--tx-store-path", help="path to encoded txs")
    parser.add_argument("--threads", type=_u64, help="number of threads used during flooding")
    parser.add_argument("--download-nonces", action="store_true",
                        help="download nonces instead of using zeros for each account")
    parser.add_argument("--submit-only", action="store_true",
                        help="await SubmitOnly instead of Ready for every transaction")
    parser.add_argument("--store-txs", action="store_true", help="store txs after generation")
    parser.add_argument("--transactions-in-interval", type=_u64,
                        help="how many transactions to put in the interval")
    parser.add_argument("--interval-secs", type=_u64, help="how long the interval is (in secs)")
    return parser


def parse_config(argv: Sequence[str] | None = None) -> FlooderConfig:
    """Parse command-line arguments into a FlooderConfig."""
    options = vars(_parser().parse_args(argv))
    if options["nodes"] is None:
        options["nodes"] = list(DEFAULT_NODES)
    return FlooderConfig(**options)


def read_phrase(phrase: str) -> str:
    """Return the file's contents without trailing whitespace if ``phrase`` names a file, else ``phrase``."""
    path = Path(phrase)
    if path.is_file():
        return path.read_text(encoding="utf-8").rstrip()
    return phrase