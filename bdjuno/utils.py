"""General helpers: de-duplication, transaction search and genesis reading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, Sequence

PER_PAGE = 100


class GenesisError(Exception):
    """Raised when the genesis document cannot be obtained."""


class TxSearchResult(Protocol):
    txs: Sequence[Any]
    total_count: int


class TxSearchNode(Protocol):
    def tx_search(self, query: str, page: int, per_page: int, order_by: str) -> TxSearchResult: ...


class GenesisNode(Protocol):
    def genesis(self) -> dict[str, Any]: ...


def remove_duplicate_values(values: Iterable[str]) -> list[str]:
    """Return the values without duplicates, keeping the first occurrence of each."""
    return list(dict.fromkeys(values))


def unique_addresses_parser(
    parser: Callable[..., Iterable[str]],
) -> Callable[..., list[str]]:
    """Wrap an addresses parser so that it never returns duplicated addresses."""

    def parse(*args: Any, **kwargs: Any) -> list[str]:
        return remove_duplicate_values(parser(*args, **kwargs))

    return parse


def query_txs(node: TxSearchNode, query: str) -> list[Any]:
    """Collect every transaction matching query, page by page."""
    txs: list[Any] = []
    page = 1
    while True:
        try:
            result = node.tx_search(query, page, PER_PAGE, "")
        except Exception as err:
            raise RuntimeError(f"error while running tx search: {err}") from err

        page += 1
        txs.extend(result.txs)
        if len(txs) == result.total_count or not result.txs:
            return txs


def read_genesis(genesis_file_path: str | Path | None, node: GenesisNode | None) -> dict[str, Any]:
    """Read the genesis from the given file, or ask the node when no file is set."""
    if genesis_file_path:
        return _read_genesis_from_file(Path(genesis_file_path))
    if node is None:
        raise GenesisError("failed to get genesis: no node and no genesis file given")
    try:
        return node.genesis()
    except Exception as err:
        raise GenesisError(f"failed to get genesis: {err}") from err


def _read_genesis_from_file(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_bytes()
    except OSError as err:
        raise GenesisError(f"failed to read genesis file: {err}") from err

    try:
        doc = json.loads(raw)
    except ValueError as err:
        raise GenesisError(f"failed to unmarshal genesis doc: {err}") from err
    if not isinstance(doc, dict):
        raise GenesisError("failed to unmarshal genesis doc: not a JSON object")
    return doc