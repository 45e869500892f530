"""
CEP-47 Client - typed access to a CEP-47 NFT contract.

Translates method calls into the contract's entry points and runtime
arguments, and translates stored CLValues back into Python values:
account references as ``account-hash-<hex>`` strings, numbers as decimal
strings, metadata as ``dict[str, str]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .chain import deploy, rpc
from .chain.args import account_hash_hex, dictionary_key
from .utils import (
    ACCOUNT_HASH_PREFIX,
    HASH_PREFIX,
    format_account_hash,
    hex_to_bytes,
    normalize_contract_hash,
)


class Cep47Error(Exception):
    pass


class EntryNotFoundError(Cep47Error, LookupError):
    """A dictionary entry holds no value."""

    def __init__(self, dictionary: str, item_key: str) -> None:
        super().__init__(f"No entry in '{dictionary}' for key {item_key}")
        self.dictionary = dictionary
        self.item_key = item_key


class ContractNotSetError(Cep47Error):
    pass


@dataclass
class CEP47InstallArgs:
    name: str
    contract_name: str
    symbol: str
    meta: dict[str, str] = field(default_factory=dict)


# ============ CLValue decoding ============


def unwrap(cl_value: dict, dictionary: str, item_key: str) -> Any:
    """Return the parsed value of an Option CLValue, failing when empty."""
    parsed = cl_value.get("parsed")
    if parsed is None:
        raise EntryNotFoundError(dictionary, item_key)
    return parsed


def parse_key(parsed: Any) -> str:
    """Format a parsed Key as ``account-hash-<hex>`` of its identifier."""
    # Nodes before 1.5 wrap keys as {"Account": "account-hash-…"}.
    if isinstance(parsed, dict) and len(parsed) == 1:
        parsed = next(iter(parsed.values()))
    if not isinstance(parsed, str):
        raise ValueError(f"Unexpected key value: {parsed!r}")
    for prefix in (ACCOUNT_HASH_PREFIX, HASH_PREFIX):
        if parsed.startswith(prefix):
            return format_account_hash(hex_to_bytes(parsed[len(prefix):]))
    raise ValueError(f"Unsupported key variant: {parsed}")


def parse_string_map(parsed: Any) -> dict[str, str]:
    if isinstance(parsed, dict):
        return {str(k): str(v) for k, v in parsed.items()}
    return {str(entry["key"]): str(entry["value"]) for entry in parsed or []}


def parse_number(parsed: Any) -> str:
    return str(int(parsed))


# ============ Client ============


class CEP47Client:
    """
    Client for one CEP-47 contract on one Casper network.

    Args:
        node_address: Node JSON-RPC URL (e.g. http://localhost:11101/rpc)
        network_name: Chain name used for deploys (e.g. casper-test)
    """

    def __init__(self, node_address: str, network_name: str) -> None:
        self.node_address = node_address
        self.network_name = network_name
        self.contract_hash: Optional[str] = None
        self.contract_package_hash: Optional[str] = None

    # ---- Setup ----

    def install(
        self,
        wasm: bytes,
        args: CEP47InstallArgs,
        payment_amount: int | str,
        sender: Any,
        keys: Optional[Iterable[Any]] = None,
        wait: bool = False,
    ) -> dict:
        """Deploy the contract wasm with its constructor arguments."""
        return deploy.install_contract(
            wasm,
            {
                "name": args.name,
                "contract_name": args.contract_name,
                "symbol": args.symbol,
                "meta": args.meta,
            },
            payment_amount=int(payment_amount),
            sender=sender,
            network_name=self.network_name,
            keys=list(keys or []),
            node_address=self.node_address,
            wait=wait,
        )

    def set_contract_hash(
        self, contract_hash: str, contract_package_hash: Optional[str] = None
    ) -> None:
        self.contract_hash = normalize_contract_hash(contract_hash)
        self.contract_package_hash = (
            normalize_contract_hash(contract_package_hash, package=True) if contract_package_hash else None
        )

    def _require_contract(self) -> str:
        if self.contract_hash is None:
            raise ContractNotSetError("Contract hash not set. Call set_contract_hash() first.")
        return self.contract_hash

    # ---- Named values ----

    def _query_named(self, name: str) -> Any:
        cl_value = rpc.query_contract_data(
            self._require_contract(), [name], node_address=self.node_address
        )
        return cl_value.get("parsed")

    def name(self) -> str:
        return self._query_named("name")

    def symbol(self) -> str:
        return self._query_named("symbol")

    def meta(self) -> dict[str, str]:
        return parse_string_map(self._query_named("meta"))

    def total_supply(self) -> str:
        return parse_number(self._query_named("total_supply"))

    # ---- Dictionaries ----

    def _query_dictionary(self, dictionary: str, item_key: str) -> Any:
        cl_value = rpc.query_contract_dictionary(
            self._require_contract(), dictionary, item_key, node_address=self.node_address
        )
        return unwrap(cl_value, dictionary, item_key)

    def balance_of(self, account: Any) -> str:
        """Number of tokens held by an account (public key or account hash)."""
        return parse_number(self._query_dictionary("balances", account_hash_hex(account)))

    def get_owner_of(self, token_id: str) -> str:
        return parse_key(self._query_dictionary("owners", str(token_id)))

    def get_token_meta(self, token_id: str) -> dict[str, str]:
        return parse_string_map(self._query_dictionary("metadata", str(token_id)))

    def get_token_by_index(self, owner: Any, index: str) -> str:
        """Token id at ``index`` in the owner's token list."""
        key = dictionary_key(owner, index, "U256")
        return parse_number(self._query_dictionary("owned_tokens_by_index", key))

    def get_index_by_token(self, owner: Any, token_id: str) -> str:
        """Position of ``token_id`` in the owner's token list."""
        key = dictionary_key(owner, token_id, "U256")
        return parse_number(self._query_dictionary("owned_indexes_by_token", key))

    def get_allowance(self, owner: Any, token_id: str) -> str:
        """Account approved to spend the owner's ``token_id``."""
        key = dictionary_key(owner, str(token_id), "String")
        return parse_key(self._query_dictionary("allowances", key))

    # ---- Entry points ----

    def _call(
        self,
        entry_point: str,
        args: dict[str, Any],
        payment_amount: int | str,
        sender: Any,
        keys: Optional[Iterable[Any]],
        wait: bool,
    ) -> dict:
        return deploy.call_entry_point(
            self._require_contract(),
            entry_point,
            args,
            payment_amount=int(payment_amount),
            sender=sender,
            network_name=self.network_name,
            keys=list(keys or []),
            node_address=self.node_address,
            wait=wait,
        )

    def approve(
        self,
        spender: Any,
        ids: list[str],
        payment_amount: int | str,
        sender: Any,
        keys: Optional[Iterable[Any]] = None,
        wait: bool = False,
    ) -> dict:
        return self._call(
            "approve",
            {"spender": spender, "token_ids": list(ids)},
            payment_amount,
            sender,
            keys,
            wait,
        )

    def mint(
        self,
        recipient: Any,
        ids: list[str],
        metas: list[dict[str, str]],
        payment_amount: int | str,
        sender: Any,
        keys: Optional[Iterable[Any]] = None,
        wait: bool = False,
    ) -> dict:
        return self._call(
            "mint",
            {"recipient": recipient, "token_ids": list(ids), "token_metas": list(metas)},
            payment_amount,
            sender,
            keys,
            wait,
        )

    def burn(
        self,
        owner: Any,
        ids: list[str],
        payment_amount: int | str,
        sender: Any,
        keys: Optional[Iterable[Any]] = None,
        wait: bool = False,
    ) -> dict:
        return self._call(
            "burn",
            {"owner": owner, "token_ids": list(ids)},
            payment_amount,
            sender,
            keys,
            wait,
        )

    def wait_for_deploy(self, deploy_hash: str, timeout: int = 180, poll_interval: float = 5.0) -> list[dict]:
        return rpc.wait_for_deploy(
            deploy_hash, timeout=timeout, poll_interval=poll_interval, node_address=self.node_address
        )
